[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "logdrift"
version = "0.1.0"
description = "Composable asyncio stages for streaming, filtering and reshaping log lines from many services"
requires-python = ">=3.11"
dependencies = []
keywords = [
    "logging",
    "logs",
    "tail",
    "pipeline",
    "stream",
    "asyncio",
    "multiline",
    "redaction",
    "sampling",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Logging",
    "Topic :: System :: Monitoring",
    "Topic :: Text Processing :: Filters",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["logdrift"]

[tool.hatch.build.targets.sdist]
include = [
    "logdrift",
    "tests",
    "pyproject.toml",
    "README.md",
]

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
