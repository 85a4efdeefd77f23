"""Device details as reported by udevadm."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from diskprobe.shell import CommandError, bash, split_lines

log = logging.getLogger(__name__)

# udev property names (compared without regard to case) and the field each fills.
_UDEV_KEYS = {
    "devpath": "dev_path",
    "devname": "dev_name",
    "devtype": "dev_type",
    "major": "major",
    "minor": "minor",
    "subsystem": "sub_system",
    "id_bus": "bus",
    "id_fs_type": "fs_type",
    "id_model": "model",
    "id_wwn": "wwn",
    "id_part_table_type": "part_table_type",
    "id_serial": "serial",
    "id_vendor": "vendor",
    "id_type": "id_type",
    "id_path": "id_path",
    "partname": "part_name",
    "name": "name",
}


def parse_udev_info(text: str) -> dict[str, str]:
    """Collect ``E:`` properties and the ``N:`` node name from ``udevadm info`` output.

    Property lines that do not hold exactly one ``=`` are skipped.
    """
    items: dict[str, str] = {}
    for line in split_lines(text):
        if not line:
            continue
        kind = line[0]
        if kind == "E":
            parts = line.replace("E: ", "", 1).split("=")
            if len(parts) != 2:
                continue
            items[parts[0]] = parts[1]
        elif kind == "N":
            items["NAME"] = line.replace("N: ", "", 1)
    return items


@dataclass
class UdevDevice:
    """A device looked up in udev by sysfs path or, failing that, by device node."""

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
    id_path: str = ""
    part_name: str = ""
    name: str = ""
    run: Callable[[str], str] = field(default=bash, repr=False, compare=False)

    def info(self) -> dict[str, str]:
        """Query udev for all properties of the device."""
        if self.dev_path:
            out = self.run(f"udevadm info -p {self.dev_path} --query=all")
        else:
            out = self.run(f"udevadm info -n {self.dev_name} --query=all")
        return parse_udev_info(out)

    def parse_device_info(self) -> None:
        """Fill the fields from udev; properties udev does not report are left as they are."""
        for key, value in sorted(self.info().items()):
            name = _UDEV_KEYS.get(key.lower())
            if name is not None:
                setattr(self, name, value)

    def is_disk(self) -> bool:
        """Tell whether the device is a physical disk.

        Devices without an ID_PATH, such as loop devices, are not disks; the
        ID_TYPE may be missing on some cloud disks.
        """
        try:
            self.parse_device_info()
        except (CommandError, OSError) as exc:
            log.error("Parse device:%s fail: %s", self.dev_path or self.dev_name, exc)
            return False
        log.debug("Device info in udev is:%s", self)
        if not self.id_path:
            return False
        return self.id_type in ("disk", "") and self.dev_type == "disk"