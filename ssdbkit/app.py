"""Base for server programs: argument parsing, config loading, pidfile and daemon handling."""

from __future__ import annotations

import contextlib
import os
import signal
import sys
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import NoReturn, Optional, Sequence

from ssdbkit.config import Config, ConfigError
from ssdbkit.fileutil import file_exists, file_get_contents, file_put_contents, is_dir, is_file
from ssdbkit.log import Level, Logger, log_open, log_write
from ssdbkit.strutil import real_dirname, str_to_int

_START_OPTIONS = ("start", "stop", "restart")


def daemonize(directory: Optional[str] = None) -> None:
    """Detach the current process from its terminal.

    Starts a new session where the process is allowed to, optionally changes
    into ``directory`` and points the standard streams at the null device.
    Exits with status 0 if any of these steps fail.
    """
    sys.stdout.flush()
    sys.stderr.flush()
    # A process group leader may not start a new session; it keeps its own.
    with contextlib.suppress(PermissionError):
        os.setsid()
    try:
        if directory is not None:
            os.chdir(directory)
        devnull = os.open(os.devnull, os.O_RDWR)
        for fd in (0, 1, 2):
            os.dup2(devnull, fd)
        if devnull > 2:
            os.close(devnull)
    except OSError:
        raise SystemExit(0)


@dataclass
class AppArgs:
    """Command-line and config derived settings of an application."""

    is_daemon: bool = False
    pidfile: str = ""
    conf_file: str = ""
    work_dir: str = ""
    start_opt: str = "start"


def _fail(message: str) -> NoReturn:
    print(message, file=sys.stderr)
    raise SystemExit(1)


class Application(ABC):
    """A long-running program configured by a file and controlled with -s start|stop|restart."""

    def __init__(self, prog: Optional[str] = None) -> None:
        self.prog = prog if prog is not None else (os.path.basename(sys.argv[0]) or "app")
        self.conf: Optional[Config] = None
        self.app_args = AppArgs()

    def main(self, argv: Optional[Sequence[str]] = None) -> int:
        """Run the whole program lifecycle; ``argv`` excludes the program name."""
        args = sys.argv[1:] if argv is None else list(argv)
        self.conf = None
        self.welcome()
        self.parse_args(args)
        self.init()
        self.write_pid()
        try:
            self.run()
        finally:
            self.remove_pidfile()
        self.conf = None
        return 0

    def usage(self, prog: Optional[str] = None) -> None:
        name = prog or self.prog
        print("Usage:")
        print(f"    {name} [-d] /path/to/app.conf [-s start|stop|restart]")
        print("Options:")
        print("    -d    run as daemon")
        print("    -s    option to start|stop|restart the server")
        print("    -h    show this message")

    @abstractmethod
    def welcome(self) -> None:
        """Print the program banner."""

    @abstractmethod
    def run(self) -> None:
        """Do the program's work."""

    def parse_args(self, argv: Sequence[str]) -> None:
        """Fill :attr:`app_args` from arguments; exits on -h, -v and bad input."""
        args = iter(argv)
        for arg in args:
            if arg == "-d":
                self.app_args.is_daemon = True
            elif arg == "-v":
                raise SystemExit(0)
            elif arg == "-h":
                self.usage()
                raise SystemExit(0)
            elif arg == "-s":
                opt = next(args, None)
                if opt is None:
                    self.usage()
                    raise SystemExit(1)
                self.app_args.start_opt = opt
                if opt not in _START_OPTIONS:
                    self.usage()
                    _fail(f"Error: bad argument: '{opt}'")
            else:
                self.app_args.conf_file = arg
        if not self.app_args.conf_file:
            self.usage()
            raise SystemExit(1)

    def init(self) -> None:
        """Load the config, handle stop/restart, open the log and check the work dir."""
        conf_file = self.app_args.conf_file
        if not is_file(conf_file):
            _fail(f"'{conf_file}' is not a file or not exists!")
        try:
            self.conf = Config.load(conf_file)
        except (OSError, ConfigError) as exc:
            log_write(Level.ERROR, "%s", exc)
            _fail(f"error loading conf file: '{conf_file}'")
        conf_dir = real_dirname(conf_file)
        try:
            os.chdir(conf_dir)
        except OSError:
            _fail(f"error chdir: {conf_dir}")

        self.app_args.pidfile = self.conf.get_str("pidfile")

        if self.app_args.start_opt == "stop":
            self.kill_process()
            raise SystemExit(0)
        if self.app_args.start_opt == "restart" and file_exists(self.app_args.pidfile):
            self.kill_process()

        self.check_pidfile()

        level_name = self.conf.get_str("logger.level").lower() or "debug"
        level = Logger.get_level(level_name)
        rotate_size = self.conf.get_int64("logger.rotate.size")
        output = self.conf.get_str("logger.output") or "stdout"
        try:
            log_open(output, level, True, rotate_size)
        except (OSError, ValueError):
            _fail(f"error opening log file: {output}")

        self.app_args.work_dir = self.conf.get_str("work_dir") or "."
        if not is_dir(self.app_args.work_dir):
            _fail(f"'{self.app_args.work_dir}' is not a directory or not exists!")

        # Must happen before any thread is started.
        if self.app_args.is_daemon:
            daemonize()

    def read_pid(self) -> Optional[int]:
        """The pid stored in the pidfile, or None when it cannot be read."""
        if not self.app_args.pidfile:
            return None
        try:
            content = file_get_contents(self.app_args.pidfile)
        except OSError:
            return None
        text = content.strip()
        if not text:
            return None
        try:
            return str_to_int(text)
        except ValueError:
            return None

    def write_pid(self) -> None:
        """Store the current pid in the pidfile, if one is configured."""
        pidfile = self.app_args.pidfile
        if not pidfile:
            return
        try:
            file_put_contents(pidfile, str(os.getpid()))
        except OSError as exc:
            log_write(Level.ERROR, "Failed to write pidfile '%s'(%s)", pidfile, exc.strerror)
            raise SystemExit(1)

    def check_pidfile(self) -> None:
        """Exit if the pidfile already exists."""
        pidfile = self.app_args.pidfile
        if pidfile and os.path.lexists(pidfile):
            _fail(
                f"Fatal error!\nPidfile {pidfile} already exists!\n"
                "Kill the running process before you run this command,\n"
                "or use '-s restart' option to restart the server."
            )

    def remove_pidfile(self) -> None:
        if self.app_args.pidfile:
            with contextlib.suppress(OSError):
                os.remove(self.app_args.pidfile)

    def kill_process(self) -> None:
        """Terminate the process named in the pidfile and wait for it to remove the file."""
        pidfile = self.app_args.pidfile
        pid = self.read_pid()
        if pid is None:
            _fail(f"could not read pidfile: {pidfile}")
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            print(f"process: {pid} not running", file=sys.stderr)
            self.remove_pidfile()
            return
        except OSError:
            pass
        try:
            os.kill(pid, signal.SIGTERM)
        except OSError as exc:
            _fail(f"could not kill process: {pid}({exc.strerror})")
        while file_exists(pidfile):
            time.sleep(0.1)