"""Discover local block disks and describe them from udev, sysfs, lsblk and RAID controller output."""

__version__ = "0.1.0"