[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diskprobe"
version = "0.1.0"
description = "Discover local block disks and describe them from udev, sysfs, lsblk and RAID controller output"
requires-python = ">=3.10"
dependencies = []
keywords = ["disk", "block device", "udev", "sysfs", "lsblk", "raid", "storage"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["diskprobe"]

[tool.pytest.ini_options]
addopts = "-ra"
