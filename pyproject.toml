[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simplebank"
version = "0.1.0"
description = "A small banking service: owners, accounts, entries and transfers on SQLite behind a token-authenticated HTTP API."
requires-python = ">=3.10"
keywords = ["bank", "accounts", "transfers", "flask", "sqlite", "jwt", "paseto", "api"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: Flask",
    "Operating System :: OS Independent",
    "Topic :: Office/Business :: Financial",
]
dependencies = [
    "flask",
    "pyjwt",
    "bcrypt",
    "pynacl",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
simplebank = "simplebank.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["simplebank"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
