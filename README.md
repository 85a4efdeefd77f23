# diskprobe

diskprobe finds the block disks on a Linux host and describes each one. It
reports the disk's udev attributes, capacity, device type, drive type (HDD or
SSD) and partitions. For one supported RAID controller model it also reports
the state of the array and its member drives. It can list the disks present
at start-up and follow udev events as disks come and go.

It reads `/sys` and runs `udevadm`, `lsblk` and `storcli` through `bash`. It
is meant for Linux hosts where those tools are installed. When a command exits
with a non-zero status, `diskprobe.shell.bash` raises
`diskprobe.shell.CommandError`. The standard output gathered up to that point
is kept in its `output` attribute.

## Installing

```
pip install .
```

## Describing a disk

```python
from diskprobe.disk import identify_with_name
from diskprobe.parser import default_disk_parser

parser = default_disk_parser()
parser.for_disk(identify_with_name("/sys/devices/.../block/sda", "/dev/sda"))
info = parser.parse_disk()

print(info.attribute.capacity, info.attribute.dev_type, info.attribute.driver_type)
for part in info.partitions:
    print(part.name, part.size, part.label, part.filesystem)
print(info.raid.has_raid, info.raid.raid_state)
print(info.generate_uuid())
```

`parse_disk()` returns a `DiskInfo` made of four parts:

- `identify`: the disk's sysfs path, device node and kernel name.
- `attribute`: an `Attribute` built from udev and sysfs. If udev cannot be
  queried, every field is left empty. Capacity, device type and drive type
  stay unset when sysfs cannot supply them.
- `partitions`: a list of `PartitionInfo` read from `lsblk` and udev. A
  filesystem placed directly on the disk is listed under the disk's own name.
  The list is empty when the partitions cannot be read.
- `raid`: a `RaidInfo`. It is filled only for disks whose model is
  `MR9361-8i`, and only RAID5 virtual drives are considered.

`DiskInfo.generate_uuid()` returns the MD5 hex digest of the disk's serial,
model, vendor and WWN. For the virtual disk models `EphemeralDisk`,
`QEMU_HARDDISK` and `Virtual_disk`, the host name and device name are mixed in
as well.

The parsers `diskprobe.lsblk.PartitionParser`, `diskprobe.lsblk.AttributeParser`
and `diskprobe.raid.RaidParser` each accept a `run` callable in place of
`bash`. You can pass one to supply command output yourself.

## Listing and watching disks

```python
from diskprobe.monitor import DiskManager

manager = DiskManager()
for event in manager.list_exist():
    print(event.type, event.dev_name)

for event in manager.monitor():
    print(event.type, event.dev_path)
```

`list_exist()` walks `<sysfs_root>/devices`, where `sysfs_root` defaults to
`/sys`. It keeps devices of the `block` subsystem and returns an
`EventType.EXIST` event for each disk. It returns an empty list if sysfs
cannot be read.

`monitor()` listens on the netlink udev event group and yields an `Event` for
each matching action, such as `add`, `remove` or `change`. It reconnects
whenever the stream fails. `diskprobe.monitor.parse_uevent` decodes a single
kernel or libudev netlink message.

Only whole disks are reported. A disk must have a udev `ID_PATH`, a `DEVTYPE`
of `disk`, and an `ID_TYPE` that is `disk` or missing. Loop devices and
partitions are therefore left out.

## Smaller pieces

- `diskprobe.blockdev.BlockDevice` reads the following straight from sysfs:
  - block sizes
  - capacity
  - drive type
  - an lsblk-style device type
  - parent device, holders, slaves and partitions

  `device_from_dev_path` builds one from a path such as `/dev/sda`.
- `diskprobe.udev.UdevDevice` and `parse_udev_info` turn `udevadm info`
  output into device attributes.
- `diskprobe.textparse` holds three parsers:
  - `parse_key_value_pairs` for `KEY="value"` pairs
  - `parse_raid_fields` for RAID controller virtual-drive columns
  - `parse_raid_disk_fields` for RAID controller physical-disk columns

  It also holds `convert_node_name`, along with `node_name()` and
  `namespace()`, which read the `NODENAME` and `NAMESPACE` environment
  variables.
- `diskprobe.sysfs.read_int` and `read_str` read single sysfs values.
- `diskprobe.endpoint.parse_endpoint` splits `unix://…` or `tcp://host:port`
  into protocol and address. Anything without one of those prefixes is taken
  as a Unix socket path.
- `diskprobe.endpoint.listen` opens a listening socket and returns it with a
  cleanup function.
  - For Unix sockets, a `/` is put in front of the address, a stale socket
    file is removed before binding, and the cleanup removes the socket file.
  - For TCP, a bracketed host such as `[::1]:9000` listens on IPv6.

## What it does not do

diskprobe is a library only, with no command-line program. It describes disks
and reports events; it does not record them anywhere, publish them to other
services, or act on them. It does not claim, mount, format or wipe disks.

## Running the tests

```
pip install .[test]
pytest
```