[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "syslabs"
version = "0.1.0"
description = "Systems programming lab tools: a cache simulator, cache-friendly matrix transposes with a trace generator and evaluator, robust stream I/O and a small CGI adder"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "cache",
    "simulator",
    "lru",
    "matrix-transpose",
    "memory-trace",
    "robust-io",
    "cgi",
    "education",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
syslabs-csim = "syslabs.csim:main"
syslabs-tracegen = "syslabs.tracegen:main"
syslabs-test-trans = "syslabs.evaluator:main"
syslabs-adder = "syslabs.adder:main"

[tool.hatch.build.targets.wheel]
packages = ["syslabs"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
