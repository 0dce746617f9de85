[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "contestbot"
version = "0.1.0"
description = "Telegram bot that runs invitation contests in group chats and hands out participant numbers"
requires-python = ">=3.10"
keywords = ["telegram", "bot", "contest", "giveaway", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Russian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
contestbot = "contestbot.app:main"

[tool.setuptools.packages.find]
include = ["contestbot*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
