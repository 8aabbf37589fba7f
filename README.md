# logdrift

logdrift collects log output from several services at once and passes it
through small, composable asyncio stages. Each stage reads an async stream
of `LogLine` records and yields a new one, so stages can be chained in
whatever order a job calls for.

A `LogLine` (in `logdrift.runner`) is a frozen dataclass with a `service`,
its `text`, an optional `error` and the time `at` which it was made.

## Installation

```
pip install logdrift
```

For running the test suite:

```
pip install "logdrift[test]"
pytest
```

## Sources

- `runner.Runner().start(service, shell, args)` is awaited to launch a
  command and returns a stream of the lines it writes to stdout and stderr.
  The stream ends when the command exits; closing it early kills the
  command. `Runner.stop_all()` kills every command the runner started.
- `tail.Tailer(path).tail(service)` follows a file from its current end, the
  way `tail -f` does; each yielded line keeps its terminator.
  `tail.tail_all(sources)` follows a list of `tail.FileSource(service, path)`
  entries as one merged stream.
- `tail.watch(tail.WatchConfig(path, interval))` yields a `tail.WatchResult`
  for every tailer it starts, the first included; its `lines` stream carries
  the text of new lines and ends when the file is rotated, after which a new
  result follows.
- `rotate.Watcher({name: path}, interval).watch()` polls files and yields a
  `rotate.RotationEvent(source, path)` whenever a file's inode changes or its
  size shrinks.
- `retry.Retryer(max_attempts, delay)` takes a factory, called with no
  arguments, that returns a stream (or an awaitable of one). Awaiting
  `Retryer.apply(factory)` opens the first stream and returns one that
  re-opens it through the factory when it ends, up to `max_attempts`
  streams in all.
- `fanin.fan_in(*streams)` merges several streams into one that ends when
  all of them have.

## Stages

| Name | What it does |
| --- | --- |
| `multiline.Joiner(start_pattern, timeout)` | joins lines that do not match the start pattern onto the record before them, with newlines; a pending record is flushed after `timeout` seconds |
| `normalize.Normalizer(lowercase=, collapse_spaces=, trim=)` | lower-cases, collapses whitespace runs, trims; `apply` works on one line, `apply_all` on a stream |
| `strip.Stripper(ansi=, whitespace=)` | removes ANSI escape codes and surrounding whitespace; `apply` works on a string, `stream` on a stream |
| `redact.Redactor(patterns)` | replaces regex matches; replacements may use `$1`, `${name}` and `$$`; `add_rule`, `rule_count`, `apply_stream` |
| `prefix.Prefixer(prefix)` | prepends a fixed string |
| `offset.Stamper(fmt)` | prefixes each line with its byte offset in its service's stream (default `"[%010d] %s"`); `current`, `reset` |
| `sequence.Sequencer(prefix)` | appends a global tag such as ` [#42]`; `current`, `reset` |
| `timestamp.Stamper(fmt)` | prepends the line's time as `TimestampFormat.RFC3339`, `UNIX`, `KITCHEN` or `RELATIVE` |
| `suppress.Suppressor(max_reps)`, `suppress.apply` | drops a line repeated more than `max_reps` times in a row for a service |
| `sample.Sampler(n)` | keeps every `n`-th line of each service |
| `sampler.Config(n)`, `sampler.apply` | keeps every `n`-th line of the whole stream |
| `ratelimit.Limiter(lines_per_sec)` | forwards at most that many lines per second; 0 means unlimited |
| `overflow.Limiter(capacity, policy)` | buffers lines and, when full, drops them (`Policy.DROP`) or waits (`Policy.BLOCK`) |
| `pause.Controller`, `pause.apply(controller, source)` | holds lines back while paused, without losing them |
| `reorder.Reorderer(window, extract)` | buffers lines for `window` seconds and emits them sorted by the timestamp `extract` returns |
| `splitter.Splitter(rules, default_bucket)` | routes lines into named outputs made with `splitter.make_outputs` by the first matching pattern |
| `tee.tee(source)` | duplicates one stream into two |
| `window.Window(size)` | counts lines per service within a sliding time window |
| `snapshot.Collector` | records a stream into a `Snapshot` that can be saved as JSON and read back with `snapshot.load` |

## Example

```python
import asyncio

from logdrift.prefix import Prefixer
from logdrift.runner import LogLine
from logdrift.sequence import Sequencer


async def source():
    yield LogLine("api", "started")
    yield LogLine("api", "ready")


async def main():
    stream = Prefixer("[api] ").apply(source())
    stream = Sequencer("#").apply(stream)
    async for line in stream:
        print(line.text)


asyncio.run(main())
# [api] started [#1]
# [api] ready [#2]
```

A recorded stream can be kept and read back later:

```python
from logdrift.snapshot import Collector, load


async def record():
    snap = await Collector().collect(source())
    snap.save("baseline.json")
    return load("baseline.json")
```

## What it does not do

logdrift is a library of stages only. It has no command-line program and
no configuration file: pipelines are put together in Python code. Snapshots
can be saved and loaded, but nothing in the package compares one snapshot
with another.