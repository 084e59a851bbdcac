[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cardiorespi"
version = "0.1.0"
description = "ECG and respiration signal processing for ADS1292R front ends: frame decoding, filtering, heart rate and respiration rate detection"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ecg",
    "respiration",
    "heart-rate",
    "qrs",
    "ads1292r",
    "biosignal",
    "fir-filter",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cardiorespi-monitor = "cardiorespi.monitor:main"

[tool.hatch.build.targets.wheel]
packages = ["cardiorespi"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
