[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wizweb"
version = "2.0.0"
description = "A small HTTP server with CGI endpoints for viewing and changing the settings of a CAN-to-Ethernet bridge"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "server", "cgi", "can", "configuration"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wizweb = "wizweb.app:main"

[tool.hatch.build.targets.wheel]
packages = ["wizweb"]

[tool.pytest.ini_options]
addopts = "-ra"
