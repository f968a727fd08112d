import os

import pytest

from ssdbkit import strutil


@pytest.mark.parametrize("text,expected", [("", True), (" \t\r\n", True), (" x ", False)])
def test_is_empty_str(text, expected):
    assert strutil.is_empty_str(text) is expected


def test_real_dirname_absolute():
    assert strutil.real_dirname("/etc/app/app.conf") == "/etc/app"


def test_real_dirname_relative(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cwd = os.getcwd()
    assert strutil.real_dirname("conf/app.conf") == cwd + "/conf"
    assert strutil.real_dirname("app.conf") == cwd + "/"


def test_escape_special_characters():
    assert strutil.str_escape(b"\r\n\t\\") == "\\r\\n\\t\\\\"


def test_escape_keeps_printable_ascii():
    assert strutil.str_escape(b"hello world!~") == "hello world!~"


def test_escape_output_is_printable():
    escaped = strutil.str_escape(bytes(range(256)))
    assert all(" " <= ch <= "~" for ch in escaped)


def test_escape_unescape_round_trip():
    data = bytes(range(256)) * 2
    assert strutil.str_unescape(strutil.str_escape(data)) == data


def test_unescape_known_sequences():
    assert strutil.str_unescape("\\a\\b\\f\\v") == b"\a\b\f\v"
    assert strutil.str_unescape("\\q") == b"q"


def test_unescape_trailing_backslash_dropped():
    assert strutil.str_unescape("abc\\") == b"abc"


def test_unescape_short_hex_sequence():
    assert strutil.str_unescape("\\x4") == b"4"
    assert strutil.str_unescape("\\x") == b""


def test_hexmem_matches_escape():
    data = b"a\x00b\xff"
    assert strutil.hexmem(data) == strutil.str_escape(data)


def test_dump_prints_escaped(capsys):
    strutil.dump(b"a\nb")
    strutil.dump(b"z", "msg")
    out = capsys.readouterr().out.splitlines()
    assert out == ["dump <a\\nb>", "msg <z>"]


def test_format_number_int_and_whole_float():
    assert strutil.format_number(42) == "42"
    assert strutil.format_number(42.0) == "42"


def test_format_number_fraction():
    assert strutil.format_number(1.5) == "1.500000"


def test_str_to_int_valid():
    assert strutil.str_to_int("123") == 123
    assert strutil.str_to_int("-77") == -77
    assert strutil.str_to_int("  42") == 42


def test_str_to_int_empty_is_zero():
    assert strutil.str_to_int("") == 0


@pytest.mark.parametrize("bad", ["12abc", "abc", " ", "1 ", "1.5"])
def test_str_to_int_invalid(bad):
    with pytest.raises(ValueError):
        strutil.str_to_int(bad)


def test_str_to_int_truncates_to_32_bits():
    assert strutil.str_to_int(str(2**32 + 5)) == 5


def test_str_to_int64_clamps():
    assert strutil.str_to_int64("99999999999999999999") == 0x7FFFFFFFFFFFFFFF
    assert strutil.str_to_int64(str(2**62)) == 2**62


def test_str_to_int64_accepts_bytes():
    assert strutil.str_to_int64(b"-1234567890123") == -1234567890123


def test_str_to_uint64_wraps_negative():
    assert strutil.str_to_uint64("-1") == 18446744073709551615


def test_str_to_uint64_invalid():
    with pytest.raises(ValueError):
        strutil.str_to_uint64("7x")


def test_str_to_double():
    assert strutil.str_to_double("3.25abc") == 3.25
    assert strutil.str_to_double("abc") == 0.0
    assert strutil.str_to_double(" -2e3") == -2e3


def test_substr_invariants():
    s = "abcdefgh"
    assert strutil.substr(s, 0, len(s)) == s
    assert strutil.substr(s, -3, 3) == s[-3:]
    assert strutil.substr(s, 2, -2) == s[2:-2]
    assert strutil.substr(s, len(s), 1) == ""
    assert strutil.substr(s, -100, 1) == ""
    assert strutil.substr(b"abc", 1, 1) == b"b"


def test_str_slice_invariants():
    s = "abcdefgh"
    assert strutil.str_slice(s, 0, -1) == s
    assert strutil.str_slice(s, 1, 3) == s[1:4]
    assert strutil.str_slice(s, -2, -1) == s[-2:]
    assert strutil.str_slice(s, 5, 2) == ""
    assert strutil.str_slice(s, len(s), -1) == ""


def test_bitcount():
    assert strutil.bitcount(b"") == 0
    assert strutil.bitcount(b"\xff" * 5) == 40
    assert strutil.bitcount(b"\x00" * 5) == 0


def test_big_endian_swap():
    assert strutil.big_endian16(0x1234) == 0x3412


@pytest.mark.parametrize(
    "func,bits",
    [(strutil.big_endian16, 16), (strutil.big_endian32, 32), (strutil.big_endian64, 64)],
)
def test_big_endian_is_involution(func, bits):
    for value in (0, 1, 2**bits - 1, 0x0102030405060708 & (2**bits - 1)):
        assert func(func(value)) == value
    assert func(1) == 1 << (bits - 8)