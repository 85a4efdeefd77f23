from diskprobe.disk import Attribute, RaidDisk, RaidInfo
from diskprobe.raid import RAID_MODELS, RaidParser
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


RAID_ATTR = Attribute(model=RAID_MODELS[0])


def test_non_raid_model_runs_nothing():
    run = make_runner([])
    info = RaidParser(run=run).parse_raid_info(Attribute(model="QEMU_HARDDISK"))
    assert info == RaidInfo()
    assert run.calls == []


def test_raid5_virtual_drive_and_disks():
    run = make_runner(
        [
            ("/vall", "0/0 RAID5 Optl vd0\n"),
            ("grep 252: -c", "2\n"),
            ("grep 252:0 ", "252:0 10 Onln 0 1.0TB SATA HDD ST1000\n"),
            ("grep 252:1 ", "252:1 11 Rbld 0 1.0TB SATA HDD ST1000\n"),
        ]
    )
    info = RaidParser(run=run).parse_raid_info(RAID_ATTR)
    assert info.has_raid is True
    assert info.raid_type == "RAID5"
    assert info.raid_state == "Optl"
    assert info.raid_name == "vd0"
    assert info.raid_disk_list == [
        RaidDisk(
            drive_group="0",
            enclosure_device_id="252",
            slot_no="0",
            device_id="10",
            media_type="HDD",
            raid_disk_state="Onln",
        ),
        RaidDisk(
            drive_group="0",
            enclosure_device_id="252",
            slot_no="1",
            device_id="11",
            media_type="HDD",
            raid_disk_state="Rbld",
        ),
    ]


def test_disk_of_other_drive_group_is_left_out():
    run = make_runner(
        [
            ("/vall", "0/0 RAID5 Dgrd vd0\n"),
            ("grep 252: -c", "2\n"),
            ("grep 252:0 ", "252:0 10 Onln 0 1.0TB SATA HDD ST1000\n"),
            ("grep 252:1 ", "252:1 11 UGood 1 1.0TB SATA SSD ST1000\n"),
        ]
    )
    info = RaidParser(run=run).parse_raid_info(RAID_ATTR)
    assert [d.slot_no for d in info.raid_disk_list] == ["0"]
    assert info.raid_state == "Dgrd"


def test_failed_count_gives_no_disks():
    run = make_runner([("/vall", "0/0 RAID5 Optl vd0\n")])
    info = RaidParser(run=run).parse_raid_info(RAID_ATTR)
    assert info.has_raid is True
    assert info.raid_disk_list == []


def test_commands_name_raid5_and_enclosure():
    run = make_runner([("grep 252: -c", "1\n")])
    RaidParser(run=run).parse_raid_info(RAID_ATTR)
    assert "grep RAID5" in run.calls[0]
    assert "grep 252: -c" in run.calls[1]
    assert "grep 252:0 " in run.calls[2]
    assert len(run.calls) == 3