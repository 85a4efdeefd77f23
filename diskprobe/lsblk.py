"""Partition and attribute discovery for a single disk."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from diskprobe.blockdev import BlockDevice
from diskprobe.disk import Attribute, DiskIdentify, PartitionInfo
from diskprobe.shell import CommandError, bash, split_lines
from diskprobe.textparse import parse_key_value_pairs
from diskprobe.udev import UdevDevice

log = logging.getLogger(__name__)

PART_TYPE = "part"

_UINT = re.compile(r"[0-9]+")


def _parse_size(text: str) -> int:
    if not _UINT.fullmatch(text) or int(text) >= 2**64:
        raise ValueError(f"invalid partition size {text!r}")
    return int(text)


class PartitionParser:
    """Lists the partitions of a disk using lsblk and udev."""

    def __init__(self, disk: DiskIdentify, run: Callable[[str], str] = bash) -> None:
        self.disk = disk
        self.run = run

    def has_partition(self) -> bool:
        """Always reports that the disk may hold partitions."""
        log.info("Parse disk %s", self.disk.dev_path)
        return True

    def parse_partition_info(self) -> list[PartitionInfo]:
        """Return the disk's partitions; an empty list when they cannot be read."""
        log.debug("Parse disk %s", self.disk.name)
        try:
            return self._partitions()
        except (CommandError, OSError, ValueError) as exc:
            log.error("Parse partition info fail: %s", exc)
            return []

    def _partitions(self) -> list[PartitionInfo]:
        name = self.disk.name
        device_path = name if "/" in name else f"/dev/{name}"
        output = self.run(
            f"lsblk {device_path} --bytes --pairs --output NAME,SIZE,TYPE,PKNAME,FSTYPE"
        )

        partitions = []
        for line in split_lines(output):
            props = parse_key_value_pairs(line)
            if props.get("NAME", "") == name:
                if props.get("FSTYPE", ""):
                    partitions.append(PartitionInfo(name=name, filesystem=props["FSTYPE"]))
                continue

            if not (props.get("PKNAME", "") == name and props.get("TYPE", "") == PART_TYPE):
                continue

            part_name = props.get("NAME", "")
            size = _parse_size(props.get("SIZE", ""))
            device = UdevDevice(dev_name=f"/dev/{part_name}", run=self.run)
            device.parse_device_info()
            partitions.append(
                PartitionInfo(
                    name=part_name,
                    size=size,
                    label=device.part_name,
                    filesystem=device.fs_type,
                )
            )
        return partitions


class AttributeParser:
    """Gathers disk attributes from udev and sysfs."""

    def __init__(self, disk: DiskIdentify, run: Callable[[str], str] = bash) -> None:
        self.disk = disk
        self.run = run

    def parse_disk_attr(self) -> Attribute:
        """Return the disk attributes; empty when udev knows nothing of the disk.

        Capacity, device type and drive type are left unset when sysfs cannot supply them.
        """
        dev_path = self.disk.dev_path
        udev = UdevDevice(dev_path=dev_path, run=self.run)
        try:
            udev.parse_device_info()
        except (CommandError, OSError) as exc:
            log.error("Parse device by udev fail: %s", exc)
            return Attribute()

        device = BlockDevice(sys_path=dev_path, path=udev.dev_name, device_name=udev.name)
        attr = Attribute(
            dev_path=dev_path,
            dev_name=udev.dev_name,
            major=udev.major,
            minor=udev.minor,
            sub_system=udev.sub_system,
            bus=udev.bus,
            fs_type=udev.fs_type,
            model=udev.model,
            wwn=udev.wwn,
            serial=udev.serial,
            vendor=udev.vendor,
            id_type=udev.id_type,
        )

        try:
            attr.capacity = device.capacity_in_bytes()
        except (OSError, ValueError) as exc:
            log.error("Parse disk %s capacity fail: %s", dev_path, exc)

        try:
            attr.dev_type = device.device_type("")
        except (OSError, ValueError) as exc:
            log.error("Parse disk %s type fail: %s", dev_path, exc)

        try:
            attr.driver_type = device.drive_type()
        except (OSError, ValueError) as exc:
            log.error("Parse disk %s driver type fail: %s", dev_path, exc)

        return attr