import re

import pytest

from ssdbkit.log import (
    Level,
    Logger,
    log_level,
    log_write,
    set_log_level,
    shared_logger,
)

LINE_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3} (.{8})(.*)\n$", re.S)


@pytest.fixture
def restore_shared_level():
    saved = shared_logger().level
    yield
    shared_logger().level = saved


def test_get_level_names():
    assert Logger.get_level("trace") == Level.TRACE
    assert Logger.get_level("info") == Level.INFO
    assert Logger.get_level("none") == Level.NONE
    assert Logger.get_level("bogus") == Level.DEBUG
    assert Logger.get_level("INFO") == Level.DEBUG


def test_level_constants_match_source():
    logger = Logger()
    logger.level = Level.MIN
    assert logger.level_name() == "fatal"
    logger.level = Level.MAX
    assert logger.level_name() == "trace"
    assert (
        Logger.get_level("none")
        < Logger.get_level("fatal")
        < Logger.get_level("error")
        < Logger.get_level("warn")
        < Logger.get_level("info")
    )


def test_level_name_follows_level():
    logger = Logger()
    assert logger.level_name() == "debug"
    logger.level = Level.WARN
    assert logger.level_name() == "warn"
    logger.level = Level.NONE
    assert logger.level_name() == ""


def test_file_output_format(tmp_path):
    path = tmp_path / "out.log"
    logger = Logger()
    logger.open(str(path), Level.INFO)
    written = logger.info("hello %d", 5)
    logger.close()
    content = path.read_text()
    assert len(content.encode()) == written
    match = LINE_RE.match(content)
    assert match is not None
    assert match.group(1) == "[INFO ] "
    assert match.group(2) == "hello 5"


def test_level_filters_messages(tmp_path):
    path = tmp_path / "out.log"
    logger = Logger()
    logger.open(str(path), Level.WARN)
    assert logger.debug("hidden") == 0
    assert logger.info("hidden") == 0
    assert logger.error("shown") > 0
    logger.close()
    lines = path.read_text().splitlines()
    assert len(lines) == 1
    assert "[ERROR] shown" in lines[0]


def test_open_records_settings(tmp_path):
    path = tmp_path / "x.log"
    logger = Logger()
    logger.open(str(path), Level.TRACE, True, 1234)
    assert logger.output_name() == str(path)
    assert logger.rotate_size() == 1234
    assert logger.level == Level.TRACE
    assert logger.trace("t") > 0
    logger.close()


def test_open_appends(tmp_path):
    path = tmp_path / "a.log"
    path.write_text("existing\n")
    logger = Logger()
    logger.open(str(path))
    logger.debug("more")
    logger.close()
    lines = path.read_text().splitlines()
    assert lines[0] == "existing"
    assert lines[1].endswith("[DEBUG] more")


def test_open_missing_directory_raises(tmp_path):
    logger = Logger()
    with pytest.raises(OSError):
        logger.open(str(tmp_path / "missing" / "a.log"))


def test_filename_too_long_rejected():
    logger = Logger()
    with pytest.raises(ValueError):
        logger.open("a" * 5000)


def test_rotation(tmp_path):
    path = tmp_path / "r.log"
    logger = Logger()
    logger.open(str(path), Level.DEBUG, False, 10)
    logger.info("first line")
    logger.close()
    rotated = list(tmp_path.glob("r.log.*"))
    assert len(rotated) == 1
    assert "first line" in rotated[0].read_text()
    assert path.read_text() == ""


def test_stdout_output(capsys):
    logger = Logger()
    written = logger.warn("x %s", "y")
    out = capsys.readouterr().out
    assert len(out.encode()) == written
    match = LINE_RE.match(out)
    assert match is not None
    assert match.group(1) == "[WARN ] "
    assert match.group(2) == "x y"


def test_stderr_output(capsys, tmp_path):
    logger = Logger()
    logger.open("stderr")
    logger.fatal("boom")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.endswith("[FATAL] boom\n")


def test_long_message_truncated(tmp_path):
    path = tmp_path / "long.log"
    logger = Logger()
    logger.open(str(path))
    written = logger.info("z" * 10000)
    logger.close()
    content = path.read_bytes()
    assert len(content) == written
    assert len(content) < 4096
    assert content.endswith(b"z\n")


def test_message_without_args_is_literal(tmp_path):
    path = tmp_path / "p.log"
    logger = Logger()
    logger.open(str(path))
    logger.info("100% done")
    logger.close()
    assert path.read_text().endswith("[INFO ] 100% done\n")


def test_set_log_level_by_name(restore_shared_level):
    set_log_level("ERROR")
    assert log_level() == Level.ERROR
    set_log_level("trace")
    assert log_level() == Level.TRACE
    set_log_level("none")
    assert log_level() == Level.DEBUG


def test_set_log_level_by_number(restore_shared_level):
    set_log_level(Level.MIN)
    assert log_level() == Level.FATAL
    assert shared_logger().level_name() == "fatal"


def test_log_write_respects_shared_level(restore_shared_level, capsys):
    set_log_level(Level.ERROR)
    assert log_write(Level.INFO, "quiet") == 0
    assert capsys.readouterr().out == ""
    assert log_write(Level.ERROR, "loud %d", 1) > 0
    assert capsys.readouterr().out.endswith("[ERROR] loud 1\n")