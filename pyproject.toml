[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "swervebot"
version = "0.1.0"
description = "Control logic for a four-wheel swerve-drive robot: PID loops, remote-control frames, CAN motor feedback and wheel kinematics"
requires-python = ">=3.10"
dependencies = []
keywords = ["robotics", "swerve", "pid", "can", "sbus", "remote-control", "kinematics"]
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
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["swervebot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
