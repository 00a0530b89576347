[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sfont"
version = "0.1.0"
description = "SoundFont 2 chunk readers and the voice engine of a sample-based synthesizer"
requires-python = ">=3.10"
dependencies = []
keywords = ["soundfont", "sf2", "synthesizer", "midi", "audio", "riff"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sfont"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
