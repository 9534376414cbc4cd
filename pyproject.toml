[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shrs"
version = "0.1.0"
description = "A framework for building and configuring your own interactive shell"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "posix", "framework", "job-control", "aliases", "hooks"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
shrs = "shrs.shell_config:main"

[tool.hatch.build.targets.wheel]
packages = ["shrs"]

[tool.pytest.ini_options]
addopts = "-ra"
