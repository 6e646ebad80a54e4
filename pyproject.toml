[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "repofetch"
version = "2.23.1"
description = "Building blocks for Git repository summaries in the terminal: authors, churn, commits, manifests, ASCII art and inline images"
requires-python = ">=3.11"
keywords = ["git", "terminal", "repository", "statistics", "ascii-art", "manifest"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
    "Topic :: Utilities",
]
dependencies = [
    "pillow",
    "platformdirs",
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["repofetch"]

[tool.hatch.build.targets.sdist]
include = ["repofetch", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
warn_redundant_casts = true
