from pathlib import Path

from modmod.model import Exercise, Module, Topic, Track, Unit


def test_default_lists_are_not_shared():
    first = Topic(index=1, name="a", content=Path("slides.md"))
    second = Topic(index=2, name="b", content=Path("slides.md"))
    first.images.append(Path("x.png"))
    first.summary.append("s")
    assert second.images == []
    assert second.summary == []


def test_unit_defaults():
    unit = Unit(index=3, name="Intro")
    assert unit.template is None
    assert unit.topics == []
    assert unit.index == 3


def test_structures_compare_by_value():
    exercise = Exercise(
        index=1,
        name="ex",
        path=Path("/p"),
        description=Path("/p/description.md"),
        includes=["src/**/*"],
    )
    topic = Topic(index=1, name="t", content=Path("/c"), exercises=[exercise])
    make = lambda: Track(
        name="T",
        modules=[Module(index=1, name="M", description="d", units=[Unit(index=1, name="U", topics=[topic])])],
    )
    assert make() == make()
    changed = make()
    changed.modules[0].units[0].topics[0].exercises[0].includes.append("Cargo.toml")
    assert changed != make()


def test_track_holds_modules_in_order():
    modules = [Module(index=i, name=f"m{i}", description="") for i in (1, 2, 3)]
    track = Track(name="course", modules=modules)
    assert [m.index for m in track.modules] == [1, 2, 3]
    assert Track(name="empty").modules == []