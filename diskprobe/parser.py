"""Combining the partition, RAID and attribute parsers into one disk description."""

from __future__ import annotations

from dataclasses import replace

from diskprobe.disk import DiskIdentify, DiskInfo
from diskprobe.lsblk import AttributeParser, PartitionParser
from diskprobe.raid import RaidParser


class DiskParser:
    """Describes one disk at a time using the parsers it was given.

    The parsers share the same DiskIdentify, so pointing this parser at a
    disk points all of them at it.
    """

    def __init__(
        self,
        disk: DiskIdentify,
        partition_parser: PartitionParser,
        raid_parser: RaidParser,
        attribute_parser: AttributeParser,
    ) -> None:
        self.disk = disk
        self.partition_parser = partition_parser
        self.raid_parser = raid_parser
        self.attribute_parser = attribute_parser

    def for_disk(self, disk: DiskIdentify) -> DiskParser:
        """Make ``disk`` the disk to describe next."""
        self.disk.dev_name = disk.dev_name
        self.disk.dev_path = disk.dev_path
        self.disk.name = disk.name
        return self

    def parse_disk(self) -> DiskInfo:
        """Describe the current disk."""
        info = DiskInfo(identify=replace(self.disk))
        info.attribute = self.attribute_parser.parse_disk_attr()
        info.partitions = self.partition_parser.parse_partition_info()
        info.raid = self.raid_parser.parse_raid_info(info.attribute)
        return info


def default_disk_parser() -> DiskParser:
    """Build a parser using lsblk, the RAID controller tool and udev."""
    disk = DiskIdentify()
    return DiskParser(disk, PartitionParser(disk), RaidParser(disk), AttributeParser(disk))