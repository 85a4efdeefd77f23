import pytest

from diskprobe.shell import CommandError, bash, find_all, md5_hex, split_lines


def test_bash_returns_stdout():
    assert bash("echo hello") == "hello\n"


def test_bash_failure_raises_with_status():
    with pytest.raises(CommandError) as excinfo:
        bash("exit 3")
    assert excinfo.value.returncode == 3


def test_bash_failure_keeps_output():
    with pytest.raises(CommandError) as excinfo:
        bash("echo partial; echo oops >&2; exit 1")
    assert excinfo.value.output == "partial\n"
    assert "oops" in excinfo.value.stderr


def test_split_lines_empty():
    assert split_lines("") == []


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a\nb\n", ["a", "b"]),
        ("a\nb", ["a", "b"]),
        ("single", ["single"]),
        ("\n", [""]),
        ("a\n\nb\n", ["a", "", "b"]),
    ],
)
def test_split_lines(text, expected):
    assert split_lines(text) == expected


def test_split_lines_rejoin_roundtrip():
    text = "one\ntwo\nthree\n"
    assert "\n".join(split_lines(text)) + "\n" == text


def test_find_all_positions_match_substring():
    s = "x--y--z--"
    found = find_all(s, "--")
    assert len(found) == s.count("--")
    assert all(s[i : i + 2] == "--" for i in found)
    assert found == sorted(found)


def test_find_all_non_overlapping():
    assert find_all("aaaa", "aa") == [0, 2]


def test_find_all_missing():
    assert find_all("abc", "z") == []


def test_find_all_empty_substring_rejected():
    with pytest.raises(ValueError):
        find_all("abc", "")


def test_md5_known_digests():
    assert md5_hex("") == "d41d8cd98f00b204e9800998ecf8427e"
    assert md5_hex("abc") == "900150983cd24fb0d6963f7d28e17f72"


def test_md5_is_stable_and_distinct():
    assert md5_hex("disk") == md5_hex("disk")
    assert md5_hex("disk") != md5_hex("disk2")
    assert len(md5_hex("anything")) == 32