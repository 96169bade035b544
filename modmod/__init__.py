"""Build exercise book sources, slide decks and exercise packages from course tracks."""

__version__ = "0.1.0"

__all__: list[str] = []