# ssdbkit

Small pieces for writing key-value servers and the tools around them:
a record buffer for a length-prefixed wire format, tab-indented config
files, a levelled logger, IP allow/deny lists, a score-ordered set, worker
threads and a base class for daemon-style programs.

## Installing

```
pip install .
pip install ".[test]"   # with pytest, to run the tests
```

The only runtime dependency is `sortedcontainers`.

## What is inside

| Module | Purpose |
| --- | --- |
| `ssdbkit.strutil` | Escaping and unescaping of binary strings, whole-string integer parsing, slicing helpers, bit counting, byte-order swaps |
| `ssdbkit.timeutil` | `microtime()` and `time_ms()` clocks |
| `ssdbkit.fileutil` | `file_exists`, `is_dir`, `is_file`, `file_get_contents`, `file_put_contents` |
| `ssdbkit.log` | `Logger` and `Level`, writing to stdout, stderr or a file, with size-based rotation |
| `ssdbkit.buffer` | `Buffer` for length-prefixed records, and a binary `Decoder` |
| `ssdbkit.config` | Tab-indented hierarchical config files, read and written |
| `ssdbkit.ip_filter` | `IpFilter`: allow/deny lists by IP address or prefix |
| `ssdbkit.line` | `LineEncoder` / `LineDecoder`: one escaped value per line |
| `ssdbkit.linked_list` | Doubly linked list of `Node` objects |
| `ssdbkit.sorted_set` | `SortedSet`: keys ordered by integer score, then by key |
| `ssdbkit.workers` | `BlockingQueue`, `SelectableQueue`, `Worker` and `WorkerPool` |
| `ssdbkit.app` | `Application` base class: argument parsing, pidfile, start/stop/restart, `daemonize()` |

## Examples

### Records on the wire

Each record is its length in decimal, a newline, the bytes, and a newline
(a `\r\n` terminator is also accepted when reading).

```python
from ssdbkit.buffer import Buffer

buf = Buffer(8192)
buf.append_record(b"a")
buf.append_record(b"bs")
first = buf.read_record()   # b"a"
second = buf.read_record()  # b"bs"
buf.read_record()           # None: no complete record left
```

A malformed header or terminator raises `ProtocolError`.

### Escaping

```python
from ssdbkit.strutil import str_escape, str_unescape

str_escape(b"a\tb\x00")      # 'a\\tb\\x00'
str_unescape("a\\tb\\x00")   # b'a\tb\x00'
```

`str_to_int`, `str_to_int64` and `str_to_uint64` raise `ValueError` unless
the whole string is a decimal integer.

### Config files

```
# server settings
server:
	ip: 127.0.0.1
	port: 8888
logger:
	level: debug
```

Children are indented with one tab. Keys and values are separated by `:` or
`=`. Lines starting with `#` are comments. Bad syntax raises `ConfigError`.

```python
from ssdbkit.config import Config

conf = Config.load("server.conf")
ip = conf.get_str("server.ip")
port = conf.get_num("server/port")
conf.set("logger.output", "log.txt")
conf.save("server.conf")
```

Missing items give `""` from `get_str` and `0` from `get_num` and
`get_int64`; `get` returns `None`.

### IP filtering

```python
from ssdbkit.ip_filter import IpFilter

ip_filter = IpFilter()
ip_filter.add_deny("all")
ip_filter.add_allow("127.0.0.1")
ip_filter.add_allow("192.168.")
ip_filter.check_pass("192.168.1.7")  # True
ip_filter.check_pass("10.0.0.1")     # False
```

An address with three dots is matched exactly; anything else is a prefix.
Specific deny rules win over specific allow rules, which win over
`deny_all` and `allow_all`.

### Sorted set

```python
from ssdbkit.sorted_set import SortedSet

zset = SortedSet()
zset.add("b", 3)
zset.add("a", 3)
zset.add("c", -1)
zset.front()      # ("c", -1)
zset.pop_front()  # ("c", -1)
zset.front()      # ("a", 3): ties broken by key
```

### Worker pool

Subclass `Worker`, implement `proc`, and hand jobs to a `WorkerPool`. The
pool calls the factory with its name to make each worker. Finished jobs
come back from `pop()`, and `fileno()` can be watched with `select` to know
when results are ready.

```python
from ssdbkit.workers import Worker, WorkerPool

class Doubler(Worker):
    def proc(self, job):
        job["result"] = job["value"] * 2

with WorkerPool(Doubler, "doubler") as pool:
    pool.start(3)
    pool.push({"value": 21})
    done = pool.pop()   # {"value": 21, "result": 42}
```

### Logging

```python
from ssdbkit.log import Level, log_open, log_write

log_open("server.log", Level.INFO, True, 10 * 1024 * 1024)
log_write(Level.INFO, "listening on %s:%d", "127.0.0.1", 8888)
```

Lines carry a millisecond timestamp and a level tag. When the file grows
past the rotation size it is renamed with a date-time suffix and a new one
is started.

### Server programs

Subclass `Application` in `ssdbkit.app`, implement `welcome()` and `run()`,
and call `main(argv)`. It understands `-d` (run as daemon),
`-s start|stop|restart`, `-h`, `-v` and a config file path. From the config
it reads `pidfile`, `work_dir`, `logger.level`, `logger.output` and
`logger.rotate.size`, changes into the config file's directory, and writes
and removes the pidfile around `run()`.

## What it does not do

This is a library of parts. It has no key-value server, no storage engine,
no network client and no command-line tools of its own; a program built on
`Application` supplies its own `run()`.