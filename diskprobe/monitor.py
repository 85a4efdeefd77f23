"""Discovering block devices in sysfs and watching udev events for disks."""

from __future__ import annotations

import logging
import os
import re
import socket
import struct
from collections.abc import Callable, Iterator
from contextlib import closing
from dataclasses import dataclass, field

from diskprobe.disk import Event, EventType
from diskprobe.shell import bash
from diskprobe.udev import UdevDevice

log = logging.getLogger(__name__)

NETLINK_KOBJECT_UEVENT = 15
UDEV_EVENT_GROUP = 2

LIBUDEV_PREFIX = b"libudev\x00"
LIBUDEV_MAGIC = 0xFEEDCAFE

_RECV_BUFFER = 16384


@dataclass
class BlockRule:
    """Environment patterns an event must satisfy; each pattern is a regular expression."""

    env: dict[str, str] = field(default_factory=dict)

    def matches(self, env: dict[str, str]) -> bool:
        """Tell whether every pattern is found in the value of its key in ``env``."""
        for key, pattern in self.env.items():
            value = env.get(key)
            if value is None or re.search(pattern, value) is None:
                return False
        return True


def block_rule() -> BlockRule:
    """Return the rule that keeps only devices of the block subsystem."""
    return BlockRule(env={"SUBSYSTEM": "block"})


def add_sys_prefix(path: str) -> str:
    """Prefix a kernel object path with ``/sys`` unless it already starts with ``/sys/``."""
    if path.startswith("/sys/"):
        return path
    return "/sys" + path


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _parse_udev_message(data: bytes) -> tuple[str, str, dict[str, str]]:
    (magic,) = struct.unpack(">I", data[8:12])
    if magic != LIBUDEV_MAGIC:
        raise ValueError(f"cannot parse libudev event: magic number mismatch {magic:#x}")
    offset, length = struct.unpack("=II", data[16:24])
    fields = data[offset : offset + length].split(b"\x00")
    env: dict[str, str] = {}
    for item in fields[:-1]:
        key, sep, value = item.partition(b"=")
        if not sep:
            raise ValueError(f"cannot parse libudev event property {_decode(item)!r}")
        env[_decode(key)] = _decode(value)
    return env.get("ACTION", ""), env.get("DEVPATH", ""), env


def parse_uevent(data: bytes) -> tuple[str, str, dict[str, str]]:
    """Parse a kernel or libudev netlink message into action, kernel object path and environment.

    Raises ValueError when the message is malformed.
    """
    if len(data) > 40 and data[:8] == LIBUDEV_PREFIX:
        return _parse_udev_message(data)

    if not data:
        raise ValueError("empty uevent message")
    body = data[:-1] if data.endswith(b"\x00") else data
    fields = body.split(b"\x00")
    header = fields[0].split(b"@")
    if len(header) != 2:
        raise ValueError(f"wrong uevent header {_decode(fields[0])!r}")
    env: dict[str, str] = {}
    for item in fields[1:]:
        parts = item.split(b"=")
        if len(parts) != 2:
            raise ValueError(f"cannot parse uevent property {_decode(item)!r}")
        env[_decode(parts[0])] = _decode(parts[1])
    return _decode(header[0]), _decode(header[1]), env


def _read_uevent_file(path: str) -> dict[str, str]:
    env: dict[str, str] = {}
    with open(path, encoding="utf-8", errors="replace") as f:
        for line in f.read().splitlines():
            key, sep, value = line.partition("=")
            if not sep:
                break
            env[key] = value
    return env


def _connect_netlink() -> socket.socket:
    family = getattr(socket, "AF_NETLINK", None)
    if family is None:
        raise OSError("netlink sockets are not supported on this platform")
    sock = socket.socket(family, socket.SOCK_RAW, NETLINK_KOBJECT_UEVENT)
    try:
        sock.bind((os.getpid(), UDEV_EVENT_GROUP))
    except OSError:
        sock.close()
        raise
    return sock


def _walk_error(exc: OSError) -> None:
    """Report a directory that cannot be read and stop the walk with its error."""
    log.error("Cannot read %s while crawling devices: %s", exc.filename, exc)
    raise exc


class DiskManager:
    """Finds disks present on the node and reports disk events from udev."""

    def __init__(
        self,
        sysfs_root: str = "/sys",
        run: Callable[[str], str] = bash,
        connect: Callable[[], socket.socket] = _connect_netlink,
    ) -> None:
        self.sysfs_root = sysfs_root
        self.run = run
        self.connect = connect
        self.rule = block_rule()

    def _is_disk(self, kobj: str) -> bool:
        keep = UdevDevice(dev_path=kobj, run=self.run).is_disk()
        log.debug("Device:%s is %s", kobj, "keep" if keep else "drop")
        return keep

    def _existing_devices(self) -> Iterator[tuple[str, dict[str, str]]]:
        root = os.path.join(self.sysfs_root, "devices")
        if not os.path.isdir(root):
            raise FileNotFoundError(f"no such directory: {root}")
        for dirpath, dirnames, filenames in os.walk(root, onerror=_walk_error):
            dirnames.sort()
            if "uevent" not in filenames:
                continue
            env = _read_uevent_file(os.path.join(dirpath, "uevent"))
            try:
                env["SUBSYSTEM"] = os.path.basename(os.readlink(os.path.join(dirpath, "subsystem")))
            except OSError:
                pass
            if self.rule.matches(env):
                yield dirpath, env

    def list_exist(self) -> list[Event]:
        """Return an EXIST event for every disk present; an empty list if sysfs cannot be read."""
        events = []
        try:
            for kobj, env in self._existing_devices():
                if not self._is_disk(kobj):
                    continue
                events.append(
                    Event(
                        type=EventType.EXIST,
                        dev_path=kobj,
                        dev_type=env.get("DEVTYPE", ""),
                        dev_name=env.get("DEVNAME", ""),
                    )
                )
        except OSError as exc:
            log.error("Failed processing existing devices: %s", exc)
            return []
        log.info("Finished processing existing devices")
        return events

    def _watch(self) -> Iterator[Event]:
        with closing(self.connect()) as sock:
            while True:
                data = sock.recv(_RECV_BUFFER)
                if not data:
                    raise ConnectionError("event socket has been closed when monitor udev event")
                action, kobj, env = parse_uevent(data)
                if not self.rule.matches(env):
                    continue
                if not self._is_disk(kobj):
                    continue
                try:
                    event_type = EventType(action)
                except ValueError:
                    log.info("Unknown udev action %r for %s, skip it", action, kobj)
                    continue
                yield Event(
                    type=event_type,
                    dev_path=add_sys_prefix(kobj),
                    dev_type=env.get("DEVTYPE", ""),
                    dev_name=env.get("DEVNAME", ""),
                )

    def monitor(self) -> Iterator[Event]:
        """Yield disk events for ever, reconnecting whenever the event stream fails."""
        while True:
            try:
                yield from self._watch()
            except (OSError, ValueError) as exc:
                log.error("Monitor udev event fail, will try to monitor again: %s", exc)