from diskprobe.disk import DiskIdentify, PartitionInfo, RaidInfo, identify_with_name
from diskprobe.lsblk import AttributeParser, PartitionParser
from diskprobe.parser import DiskParser, default_disk_parser
from diskprobe.raid import RaidParser
from diskprobe.shell import CommandError


def make_runner(responses):
    calls = []

    def run(cmd):
        calls.append(cmd)
        for needle, out in responses:
            if needle in cmd:
                return out
        raise CommandError(cmd, 1, "", "")

    run.calls = calls
    return run


UDEV_SDB = "N: sdb\nE: DEVNAME=/dev/sdb\nE: ID_MODEL=ExampleDisk\nE: ID_TYPE=disk\n"
LSBLK_SDB = 'NAME="sdb" SIZE="1073741824" TYPE="disk" PKNAME="" FSTYPE="ext4"\n'


def build(run):
    disk = DiskIdentify()
    return DiskParser(
        disk,
        PartitionParser(disk, run=run),
        RaidParser(disk, run=run),
        AttributeParser(disk, run=run),
    )


def test_for_disk_returns_self_and_shares_identity():
    parser = build(make_runner([]))
    assert parser.for_disk(DiskIdentify(dev_path="/p", dev_name="/dev/x", name="x")) is parser
    assert parser.partition_parser.disk.name == "x"
    assert parser.attribute_parser.disk.dev_path == "/p"
    assert parser.raid_parser.disk.dev_name == "/dev/x"


def test_parse_disk_combines_results(tmp_path):
    run = make_runner([("udevadm", UDEV_SDB), ("lsblk", LSBLK_SDB)])
    parser = build(run).for_disk(identify_with_name(str(tmp_path), "/dev/sdb"))
    info = parser.parse_disk()
    assert info.identify == DiskIdentify(dev_path=str(tmp_path), name="sdb")
    assert info.attribute.model == "ExampleDisk"
    assert info.attribute.dev_name == "/dev/sdb"
    assert info.partitions == [PartitionInfo(name="sdb", filesystem="ext4")]
    assert info.raid == RaidInfo()


def test_parse_disk_identity_is_a_copy(tmp_path):
    run = make_runner([("udevadm", UDEV_SDB), ("lsblk", LSBLK_SDB)])
    parser = build(run).for_disk(identify_with_name(str(tmp_path), "sdb"))
    info = parser.parse_disk()
    parser.for_disk(DiskIdentify(name="other"))
    assert info.identify.name == "sdb"


def test_default_parser_shares_one_identity():
    parser = default_disk_parser()
    parser.for_disk(DiskIdentify(dev_path="/sys/block/sdz", name="sdz"))
    assert parser.partition_parser.disk is parser.disk
    assert parser.raid_parser.disk is parser.disk
    assert parser.attribute_parser.disk is parser.disk
    assert parser.disk.name == "sdz"