"""Reading RAID controller state for disks that sit behind a RAID card."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import replace

from diskprobe.disk import Attribute, DiskIdentify, RaidDisk, RaidInfo, RaidType
from diskprobe.shell import CommandError, bash, split_lines
from diskprobe.textparse import parse_raid_disk_fields, parse_raid_fields

log = logging.getLogger(__name__)

RAID_MODELS = ("MR9361-8i",)

ENCLOSURE_ID = "252"

_NUMBER = re.compile(r"[0-9]+")


class RaidParser:
    """Collects RAID details from the controller tool for supported disk models."""

    def __init__(
        self,
        disk: DiskIdentify | None = None,
        run: Callable[[str], str] = bash,
    ) -> None:
        self.disk = disk if disk is not None else DiskIdentify()
        self.run = run

    def _output(self, cmd: str, what: str) -> str:
        try:
            return self.run(cmd)
        except CommandError as exc:
            log.error("ParseRaidInfo %s err = %s", what, exc)
            return exc.output
        except OSError as exc:
            log.error("ParseRaidInfo %s err = %s", what, exc)
            return ""

    def parse_raid_info(self, attribute: Attribute) -> RaidInfo:
        """Return the RAID state of the disk; empty unless the model is a known RAID card.

        Only RAID5 virtual drives are considered.
        """
        info = RaidInfo()
        if attribute.model not in RAID_MODELS:
            log.info("ParseRaidInfo ri = %s", info)
            return info

        vd_output = self._output(
            f"storcli  /c0 /vall show | grep {RaidType.RAID5.value} | awk '{{print $1,$2,$3,$11}}'",
            "/vall",
        )
        dgvd = ""
        for item in split_lines(vd_output):
            props = parse_raid_fields(item)
            if "TYPE" in props:
                info.raid_type = props["TYPE"]
                info.has_raid = True
            if "State" in props:
                info.raid_state = props["State"]
            if "Name" in props:
                info.raid_name = props["Name"]
            if "DG/VD" in props:
                dgvd = props["DG/VD"]

        parts = dgvd.split("/")
        drive_group = parts[0] if len(parts) == 2 else ""

        count_output = self._output(
            f"storcli  /c0 /eall /sall show | grep {ENCLOSURE_ID}: -c", "/eall /sall"
        )
        match = _NUMBER.search(count_output)
        count = int(match.group()) if match else 0

        disks: list[RaidDisk] = []
        for slot in range(count):
            output = self._output(
                f"storcli  /c0 /eall /sall show | grep {ENCLOSURE_ID}:{slot} "
                "| awk '{print $1,$2,$3,$4,$5,$7,$8,$12}' ",
                "/eall /sall",
            )
            disk = RaidDisk()
            for item in split_lines(output):
                props = parse_raid_disk_fields(item)
                if "EID:Slt" in props:
                    pair = props["EID:Slt"].split(":")
                    if len(pair) == 2:
                        disk.enclosure_device_id, disk.slot_no = pair
                if "DID" in props:
                    disk.device_id = props["DID"]
                if "State" in props:
                    disk.raid_disk_state = props["State"]
                if "DG" in props:
                    if props["DG"] != drive_group:
                        break
                    disk.drive_group = props["DG"]
                if "Med" in props:
                    disk.media_type = props["Med"]
                log.info("ParseRaidInfo rd = %s", disk)
                disks.append(replace(disk))
        info.raid_disk_list = disks
        log.info("ParseRaidInfo ri = %s", info)
        return info