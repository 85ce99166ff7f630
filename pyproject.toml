[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "biathlon-race"
version = "0.1.0"
description = "Process a biathlon competition event log and produce a results report"
requires-python = ">=3.10"
dependencies = []
keywords = ["biathlon", "competition", "race", "events", "report", "sports"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
biathlon-race = "biathlon_race.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["biathlon_race"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
