import io
import sys

import pytest

from ssdbkit.config import Config, ConfigError

SAMPLE = (
    "# this is a comment\n"
    "\n"
    "author : someone\n"
    "\turl: http://example.com\n"
    "\n"
    "proxy :\n"
    "\tphp =\n"
    "\t\thost = 127.0.0.1\n"
    "\t\tport = 8088\n"
    "\tpy :\n"
    "\t\thost = 127.0.0.1\n"
    "\t\tport = 8080\n"
    "\n"
    "cgi =\n"
    "\tpl = /usr/bin/perl\n"
)


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "sample.conf"
    path.write_text(SAMPLE, encoding="utf-8")
    return Config.load(str(path))


def load_text(tmp_path, text):
    path = tmp_path / "t.conf"
    path.write_text(text, encoding="utf-8")
    return Config.load(path)


def test_lookup_by_dotted_path(sample):
    assert sample.get_str("proxy.php.host") == "127.0.0.1"
    assert sample.get_num("proxy.php.port") == 8088
    assert sample.get_str("cgi.pl") == "/usr/bin/perl"


def test_lookup_by_slash_path(sample):
    assert sample.get_num("proxy/py/port") == 8080


def test_nested_lookup(sample):
    author = sample.get("author")
    assert author.val == "someone"
    assert author.get_str("url") == "http://example.com"


def test_missing_items(sample):
    assert sample.get("proxy.nothing") is None
    assert sample.get_str("no.such.key") == ""
    assert sample.get_num("no.such.key") == 0
    assert sample.get_int64("no.such.key") == 0


def test_leading_comment_belongs_to_root(sample):
    first = sample.children[0]
    assert first.is_comment()
    assert first.val == " this is a comment"
    assert not sample.get("author").is_comment()


def test_root_children_order(sample):
    keys = [c.key for c in sample.children if not c.is_comment()]
    assert keys == ["author", "proxy", "cgi"]


def test_later_duplicate_wins(tmp_path):
    cfg = load_text(tmp_path, "a = 1\na = 2\n")
    assert cfg.get_str("a") == "2"


def test_num_is_lenient(tmp_path):
    cfg = load_text(tmp_path, "port = 12abc\nword = abc\n")
    assert cfg.get_num("port") == 12
    assert cfg.get_num("word") == 0


def test_int64_value(tmp_path):
    cfg = load_text(tmp_path, "size = 9000000000\n")
    assert cfg.get_int64("size") == 9000000000


def test_crlf_line_endings(tmp_path):
    path = tmp_path / "crlf.conf"
    path.write_bytes(b"a = x\r\n\tb = y\r\n")
    cfg = Config.load(path)
    assert cfg.get_str("a") == "x"
    assert cfg.get_str("a.b") == "y"


def test_invalid_indent(tmp_path):
    with pytest.raises(ConfigError) as info:
        load_text(tmp_path, "a = 1\n\t\tb = 2\n")
    assert info.value.lineno == 2


def test_leading_space_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_text(tmp_path, " a = 1\n")


def test_missing_separator(tmp_path):
    with pytest.raises(ConfigError) as info:
        load_text(tmp_path, "a = 1\nabc\n")
    assert info.value.lineno == 2


def test_missing_file(tmp_path):
    with pytest.raises(OSError):
        Config.load(tmp_path / "absent.conf")


def test_load_stdin(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("a = 1\n\tb = 2\n"))
    cfg = Config.load("stdin")
    assert cfg.get_num("a.b") == 2


def test_save_format():
    cfg = Config("root", "")
    cfg.set("a", "1")
    cfg.set("a.b", "2")
    out = io.StringIO()
    cfg.save(out)
    assert out.getvalue() == "a: 1\n\tb: 2\n"


def test_save_and_reload(sample, tmp_path):
    path = tmp_path / "out.conf"
    sample.save(str(path))
    again = Config.load(path)
    assert again.get_str("proxy.php.host") == sample.get_str("proxy.php.host")
    assert again.get_num("proxy.py.port") == sample.get_num("proxy.py.port")
    assert again.get_str("author.url") == sample.get_str("author.url")
    first, second = io.StringIO(), io.StringIO()
    sample.save(first)
    again.save(second)
    assert first.getvalue() == second.getvalue()


def test_save_to_stdout(sample, capsys):
    sample.save("stdout")
    out = capsys.readouterr().out
    assert "\t\thost: 127.0.0.1\n" in out


def test_set_builds_path():
    cfg = Config("root", "")
    node = cfg.set("x.y.z", "5")
    assert node.depth == 3
    assert cfg.get_num("x/y/z") == 5
    cfg.set("x.y.z", "6")
    assert cfg.get_num("x.y.z") == 6
    assert len(cfg.get("x.y").children) == 1