"""Disk descriptions: identity, attributes, partitions, RAID state and events."""

from __future__ import annotations

import socket
from dataclasses import dataclass, field
from enum import Enum

from diskprobe.shell import md5_hex

_VIRTUAL_DISK_MODELS = ("EphemeralDisk", "QEMU_HARDDISK", "Virtual_disk")


class EventType(str, Enum):
    """Kind of a disk event."""

    ADD = "add"
    REMOVE = "remove"
    CHANGE = "change"
    MOVE = "move"
    ONLINE = "online"
    OFFLINE = "offline"
    BIND = "bind"
    UNBIND = "unbind"
    EXIST = "exist"


@dataclass
class Event:
    """A disk event together with the device it concerns."""

    type: EventType
    dev_path: str = ""
    dev_name: str = ""
    dev_type: str = ""


@dataclass
class DiskIdentify:
    """What identifies a disk: sysfs path, device node and kernel name."""

    dev_path: str = ""
    dev_name: str = ""
    name: str = ""


def identify_with_name(dev_path: str, dev_name: str) -> DiskIdentify:
    """Build a DiskIdentify whose name is ``dev_name`` without a ``/dev/`` prefix."""
    if dev_name.startswith("/dev"):
        dev_name = dev_name.replace("/dev/", "", 1)
    return DiskIdentify(dev_path=dev_path, name=dev_name)


@dataclass
class Attribute:
    """Details of a disk as reported by udev and sysfs."""

    dev_path: str = ""
    dev_name: str = ""
    dev_type: str = ""
    major: str = ""
    minor: str = ""
    sub_system: str = ""
    bus: str = ""
    fs_type: str = ""
    model: str = ""
    wwn: str = ""
    part_table_type: str = ""
    serial: str = ""
    vendor: str = ""
    id_type: str = ""
    capacity: int = 0
    driver_type: str = ""


@dataclass
class PartitionInfo:
    """A partition, or a filesystem placed directly on the disk."""

    name: str = ""
    size: int = 0
    label: str = ""
    filesystem: str = ""


class RaidType(str, Enum):
    RAID0 = "RAID0"
    RAID1 = "RAID1"
    RAID5 = "RAID5"


class RaidState(str, Enum):
    DGRD = "Dgrd"
    OPTL = "Optl"


class RaidDiskState(str, Enum):
    UGOOD = "UGood"
    UBAD = "UBad"
    ONLN = "Onln"
    OFFLN = "Offln"
    MISSING = "Missing"
    RBLD = "Rbld"


@dataclass
class RaidDisk:
    """A physical disk that belongs to a RAID drive group."""

    drive_group: str = ""
    enclosure_device_id: str = ""
    slot_no: str = ""
    device_id: str = ""
    media_type: str = ""
    raid_disk_state: str = ""


@dataclass
class RaidInfo:
    """RAID state of a disk; type and states hold whatever the controller reports."""

    has_raid: bool = False
    raid_name: str = ""
    raid_type: str = ""
    raid_state: str = ""
    raid_disk_list: list[RaidDisk] = field(default_factory=list)


@dataclass
class DiskInfo:
    """Everything known about one disk."""

    identify: DiskIdentify = field(default_factory=DiskIdentify)
    attribute: Attribute = field(default_factory=Attribute)
    partitions: list[PartitionInfo] = field(default_factory=list)
    raid: RaidInfo = field(default_factory=RaidInfo)

    def generate_uuid(self) -> str:
        """Derive a stable identifier from serial, model, vendor and WWN.

        Virtual disks also mix in the host name and device name, since their
        hardware attributes are not unique.
        """
        attr = self.attribute
        elements = attr.serial + attr.model + attr.vendor + attr.wwn
        if attr.model in _VIRTUAL_DISK_MODELS:
            elements += socket.gethostname() + attr.dev_name
        return md5_hex(elements)