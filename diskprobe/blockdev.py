"""Block devices described by their sysfs directory."""

from __future__ import annotations

import os
from dataclasses import dataclass

from diskprobe.sysfs import read_int, read_str

DRIVE_TYPE_HDD = "HDD"
DRIVE_TYPE_SSD = "SSD"
DRIVE_TYPE_UNKNOWN = "Unknown"

BLOCK_SUBSYSTEM = "block"
NVME_SUBSYSTEM = "nvme"

# sysfs reports sizes in 512-byte sectors regardless of the hardware sector size.
SECTOR_SIZE = 512

SPARSE_BLOCK_DEVICE_TYPE = "sparse"
BLOCK_DEVICE_TYPE = "blockdevice"
BLOCK_DEVICE_PREFIX = BLOCK_DEVICE_TYPE + "-"
BLOCK_DEVICE_TYPE_DISK = "disk"
BLOCK_DEVICE_TYPE_PARTITION = "partition"
BLOCK_DEVICE_TYPE_LOOP = "loop"
BLOCK_DEVICE_TYPE_DM_DEVICE = "dm"
BLOCK_DEVICE_TYPE_LVM = "lvm"
BLOCK_DEVICE_TYPE_CRYPT = "crypt"
BLOCK_DEVICE_TYPE_MULTIPATH = "mpath"

DEFAULT_SYSFS_ROOT = "/sys/"


def _list_dir(path: str) -> list[str] | None:
    if not os.path.exists(path):
        return None
    return sorted(os.listdir(path))


@dataclass
class BlockDevice:
    """A block device: its sysfs path, device node path and kernel name."""

    sys_path: str
    path: str
    device_name: str

    def __post_init__(self) -> None:
        if not self.sys_path.endswith("/"):
            self.sys_path += "/"

    def parent(self) -> str | None:
        """Return the name of the parent block device, or None if there is none."""
        parts = self.sys_path.split("/")

        for subsystem, offset in ((BLOCK_SUBSYSTEM, 1), (NVME_SUBSYSTEM, 2)):
            if subsystem not in parts:
                continue
            i = parts.index(subsystem)
            if len(parts) - 1 >= i + offset and parts[i + offset] != self.device_name:
                return parts[i + offset]
            return None
        return None

    def partitions(self) -> list[str]:
        """Return the entries of the sysfs directory named after this device."""
        return [name for name in sorted(os.listdir(self.sys_path)) if name.startswith(self.device_name)]

    def holders(self) -> list[str] | None:
        """Return the devices held by this device, or None if sysfs has no holders entry."""
        return _list_dir(self.sys_path + "holders/")

    def slaves(self) -> list[str] | None:
        """Return the devices this device is built on, or None if sysfs has no slaves entry."""
        return _list_dir(self.sys_path + "slaves/")

    def logical_block_size(self) -> int:
        """Return the logical block size in bytes."""
        return read_int(self.sys_path + "queue/logical_block_size")

    def physical_block_size(self) -> int:
        """Return the physical block size in bytes."""
        return read_int(self.sys_path + "queue/physical_block_size")

    def hardware_sector_size(self) -> int:
        """Return the hardware sector size in bytes."""
        return read_int(self.sys_path + "queue/hw_sector_size")

    def drive_type(self) -> str:
        """Return HDD or SSD from the rotational flag.

        Raises ValueError when the flag is neither 0 nor 1.
        """
        rotational = read_int(self.sys_path + "queue/rotational")
        if rotational == 1:
            return DRIVE_TYPE_HDD
        if rotational == 0:
            return DRIVE_TYPE_SSD
        raise ValueError(f"undefined rotational value {rotational}")

    def capacity_in_bytes(self) -> int:
        """Return the device capacity in bytes.

        Raises ValueError when sysfs reports zero blocks.
        """
        blocks = read_int(self.sys_path + "size")
        if blocks == 0:
            raise ValueError("block count reported as zero")
        return blocks * SECTOR_SIZE

    def device_type(self, dev_type: str) -> str:
        """Return the device type as lsblk would show it.

        ``dev_type`` is the udev DEVTYPE; a partition is reported as such directly.
        """
        if dev_type == BLOCK_DEVICE_TYPE_PARTITION:
            return BLOCK_DEVICE_TYPE_PARTITION

        name = self.device_name
        if name.startswith("dm-"):
            try:
                dm_uuid = read_str(self.sys_path + "dm/uuid")
            except OSError as exc:
                raise OSError(f"unable to get DM_UUID, error: {exc}") from exc
            result = ""
            prefix = dm_uuid.split("-")[0]
            if prefix:
                if len(prefix) > 4 and prefix.startswith("part"):
                    result = BLOCK_DEVICE_TYPE_PARTITION
                else:
                    result = prefix
            if not result:
                result = BLOCK_DEVICE_TYPE_DM_DEVICE
        elif name.startswith("loop"):
            result = BLOCK_DEVICE_TYPE_LOOP
        elif name.startswith("md"):
            try:
                md_level = read_str(self.sys_path + "md/level")
            except OSError as exc:
                raise OSError(f"unable to get raid level, error: {exc}") from exc
            result = md_level or "md"
        else:
            result = BLOCK_DEVICE_TYPE_DISK
        return result.lower()


def device_sys_path(device_path: str, sysfs_root: str = DEFAULT_SYSFS_ROOT) -> str:
    """Resolve the sysfs directory of a device, with a trailing slash.

    A ``/dev/`` path is looked up under ``class/block`` of ``sysfs_root``;
    any other path is resolved as given.
    """
    if device_path.startswith("/dev/"):
        name = device_path.replace("/dev/", "", 1)
        link = os.path.join(sysfs_root, "class", "block", name)
    else:
        link = device_path
    return os.path.realpath(link, strict=True) + "/"


def device_from_dev_path(dev_path: str, sysfs_root: str = DEFAULT_SYSFS_ROOT) -> BlockDevice:
    """Build a BlockDevice from a device node path such as ``/dev/sda``."""
    dev_name = dev_path.replace("/dev/", "", 1)
    if not dev_name:
        raise ValueError(
            f"unable to create sysfs device from devPath for device: {dev_path}, error: device name empty"
        )
    try:
        sys_path = device_sys_path(dev_path, sysfs_root)
    except OSError as exc:
        raise OSError(
            f"unable to create sysfs device from devpath for device: {dev_path}, error: {exc}"
        ) from exc
    return BlockDevice(sys_path=sys_path, path=dev_path, device_name=dev_name)