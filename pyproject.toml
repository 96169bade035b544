[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "modmod"
version = "0.1.0"
description = "Assemble modular course tracks into an exercise book, slide decks and exercise packages"
requires-python = ">=3.11"
keywords = ["course", "teaching", "mdbook", "slidev", "exercises", "toml"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]
dependencies = [
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
modmod = "modmod.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["modmod"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
