[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "actionai"
version = "0.1.0"
description = "Command line tool for running AI actions on screen, clipboard, selected text and voice input"
requires-python = ">=3.10"
keywords = ["ai", "openai", "gnome", "wayland", "clipboard", "screenshot", "voice", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
actionai = "actionai.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["actionai"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
