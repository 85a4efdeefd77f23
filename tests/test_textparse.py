import pytest

from diskprobe.textparse import (
    convert_node_name,
    namespace,
    node_name,
    parse_key_value_pairs,
    parse_raid_disk_fields,
    parse_raid_fields,
)


def test_key_value_pairs_documented_example():
    assert parse_key_value_pairs('foo="0" bar="1" baz="biz"') == {
        "foo": "0",
        "bar": "1",
        "baz": "biz",
    }


def test_key_value_pairs_lsblk_line():
    line = 'NAME="sdb1" SIZE="1024" TYPE="part" PKNAME="sdb" FSTYPE=""'
    props = parse_key_value_pairs(line)
    assert props["NAME"] == "sdb1"
    assert props["TYPE"] == "part"
    assert props["PKNAME"] == "sdb"
    assert props["FSTYPE"] == ""


def test_key_value_pairs_skips_malformed():
    assert parse_key_value_pairs("novalue a=b=c x=y") == {"x": "y"}


def test_key_value_pairs_empty():
    assert parse_key_value_pairs("") == {}


def test_raid_disk_fields_positions():
    props = parse_raid_disk_fields("252:0 8 Onln 0 1.0TB SATA HDD ST1000")
    assert props["EID:Slt"] == "252:0"
    assert props["DID"] == "8"
    assert props["State"] == "Onln"
    assert props["DG"] == "0"
    assert props["Med"] == "HDD"
    assert props["Model"] == "ST1000"


def test_raid_disk_fields_ignores_extra_columns():
    props = parse_raid_disk_fields("a b c d e f g h extra")
    assert len(props) == 8
    assert "extra" not in props.values()


def test_raid_disk_fields_short_line():
    assert parse_raid_disk_fields("252:1 9") == {"EID:Slt": "252:1", "DID": "9"}


def test_raid_fields():
    assert parse_raid_fields("0/0 RAID5 Optl vd0") == {
        "DG/VD": "0/0",
        "TYPE": "RAID5",
        "State": "Optl",
        "Name": "vd0",
    }


def test_raid_fields_empty_line():
    assert parse_raid_fields("") == {"DG/VD": ""}


def test_node_name_from_env(monkeypatch):
    monkeypatch.setenv("NODENAME", "node-a")
    assert node_name() == "node-a"


def test_node_name_missing(monkeypatch):
    monkeypatch.delenv("NODENAME", raising=False)
    assert node_name() == ""


def test_namespace_from_env(monkeypatch):
    monkeypatch.setenv("NAMESPACE", "storage")
    assert namespace() == "storage"


def test_namespace_missing(monkeypatch):
    monkeypatch.delenv("NAMESPACE", raising=False)
    assert namespace() == ""


@pytest.mark.parametrize(
    "node, expected",
    [("10.23.10.12", "10-23-10-12"), ("worker", "worker"), ("", "")],
)
def test_convert_node_name(node, expected):
    assert convert_node_name(node) == expected