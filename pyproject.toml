[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rootservice"
version = "0.1.0"
description = "A small service skeleton: JSON configuration, a keyed object store, a service lifecycle and a WSGI resource endpoint"
requires-python = ">=3.10"
keywords = ["service", "wsgi", "daemon", "configuration", "middleware"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
]
dependencies = [
    "werkzeug",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
rootservice = "rootservice.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["rootservice"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
