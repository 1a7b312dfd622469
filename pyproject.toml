[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jsminer"
version = "0.1.0"
description = "Scan JavaScript sources, files, directories and web pages for secrets, tokens and HTTP endpoints"
requires-python = ">=3.10"
dependencies = []
keywords = ["javascript", "secrets", "scanner", "endpoints", "security", "jwt"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Information Technology",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
jsminer = "jsminer.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["jsminer"]

[tool.pytest.ini_options]
addopts = "-ra"
