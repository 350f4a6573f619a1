[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "frz"
version = "0.4.0"
description = "Building blocks for a tabular fuzzy finder: styles and themes, match highlighting, filesystem indexing with a cache, and a background search worker"
requires-python = ">=3.11"
dependencies = [
    "wcwidth",
]
keywords = ["fuzzy", "finder", "search", "index", "terminal", "themes", "highlight"]
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
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["frz"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
