"""Parsing of tool output lines and node environment settings."""

from __future__ import annotations

import logging
import os

log = logging.getLogger(__name__)

_RAID_DISK_FIELDS = ("EID:Slt", "DID", "State", "DG", "Size", "Intf", "Med", "Model")
_RAID_FIELDS = ("DG/VD", "TYPE", "State", "Name")


def parse_key_value_pairs(raw: str) -> dict[str, str]:
    """Parse ``foo="0" bar="1"`` into ``{"foo": "0", "bar": "1"}``.

    Items that do not split into exactly one key and one value are skipped.
    """
    props = {}
    for item in raw.split(" "):
        parts = item.split("=")
        if len(parts) == 2:
            key, value = parts
            props[key] = value.replace('"', "")
    return props


def _positional(raw: str, names: tuple[str, ...]) -> dict[str, str]:
    return dict(zip(names, raw.split(" ")))


def parse_raid_disk_fields(raw: str) -> dict[str, str]:
    """Name the space-separated columns of a RAID physical disk line."""
    return _positional(raw, _RAID_DISK_FIELDS)


def parse_raid_fields(raw: str) -> dict[str, str]:
    """Name the space-separated columns of a RAID virtual drive line."""
    return _positional(raw, _RAID_FIELDS)


def _env(name: str, what: str) -> str:
    value = os.environ.get(name)
    if value is None:
        log.error("Failed to get %s from ENV", what)
        return ""
    return value


def node_name() -> str:
    """Return the node name from ``NODENAME``, or an empty string."""
    return _env("NODENAME", "NODENAME")


def namespace() -> str:
    """Return the namespace from ``NAMESPACE``, or an empty string."""
    return _env("NAMESPACE", "NameSpace")


def convert_node_name(node: str) -> str:
    """Replace every dot with a dash, e.g. ``10.23.10.12`` -> ``10-23-10-12``."""
    return node.replace(".", "-")