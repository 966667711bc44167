# remotecache

Building blocks for a remote build cache used by Bazel and other REAPI
clients: checking ActionResults, parsing cache request paths, basic
authentication for gRPC calls, idle detection, temp file creation and
command line help.

## Modules

- `remotecache.validate`: dataclasses for the ActionResult data model
  (`Digest`, `OutputFile`, `OutputDirectory`, `OutputSymlink`,
  `ExecutedActionMetadata`, `ActionResult`).
  `validate_action_result(action_result)` checks an ActionResult's own
  fields (paths, symlink targets, digests), not the blobs it refers to. It
  returns the ActionResult unchanged or raises `ValidationError`.
  `is_valid_hash(value)` is true for a lower-case hex SHA-256 sum.
- `remotecache.http_cache`: `parse_request_url(url, validate_ac)` splits a
  path such as `prefix/ac/<sha256>` into a `ParsedURL` of
  `(kind, hash, instance)`. `kind` is an `EntryKind`. AC paths give
  `EntryKind.AC` when `validate_ac` is true and `EntryKind.RAW` when it is
  false. Paths that are not cache entries raise `RequestURLError`.
  `blob_path(kind, hash_value)` gives `/<kind>/<hash>`.
  `client_address(remote_addr)` strips the port from `host:port`, or
  returns the address unchanged if it has no port.
- `remotecache.basic_auth`: `get_login(metadata)` reads the user and
  password from `:authority` metadata of the form `user:pass@address`.
  `check_secret(password, secret)` verifies a password against an
  htpasswd-style hash: `{SHA}`, `$apr1$`, `$1$` or bcrypt. bcrypt only works
  when a passlib bcrypt backend is installed.
  `GrpcBasicAuth(secrets, allow_unauthenticated_read_only, read_only_methods)`
  takes a `secrets(username, realm)` lookup. Its
  `intercept(full_method, metadata, handler, request)` calls
  `handler(request)` in three cases: the call is the health check, the
  method is read-only and unauthenticated reads are allowed, or the
  credentials match. Otherwise it raises `Unauthenticated`.
- `remotecache.idle`: `IdleTimer(timeout)` checks once a second. When more
  than `timeout` seconds have passed since the last `reset()`, it sets
  every `threading.Event` given to `register()`, then stops.
- `remotecache.grpc_idle`: `GrpcIdleTimer(idle_timer).intercept(handler, request)`
  resets the timer, then calls the handler.
- `remotecache.tempfiles`: `Creator(seed)` makes files named
  `<base>-<nine digits>`, with a `.v1` suffix when `legacy` is true. Files
  are created exclusively with the setgid bit set, to mark them unfinished.
  `create(base, legacy)` returns the open file and the random part of its
  name. It raises `TempFileError` when every attempt collides.
  `END_MODE` is the mode to chmod a finished file to.
- `remotecache.flags`: `cli_flags()` lists every server option as a `Flag`,
  with its default and environment variables. `Flag.help_text()` formats one
  option.
- `remotecache.usage`: `wrap(text, offset, wrap_at)` and
  `wrap_line(text, wrap_at, padding)` wrap at word boundaries.
  `console_width()` reads `COLUMNS`, falls back to `tput cols`, and never
  goes below 30. `render_help(name, flags, width)` returns the full help
  text, and `print_help(out, name, flags)` writes it.
- `remotecache.rlimit`: `raise_open_files_limit()` raises the soft
  open-files limit to the hard limit, which on macOS is capped by
  `kern.maxfilesperproc`. It returns the `(soft, hard)` pair that was set,
  or `None` on failure.
- `remotecache.testutils`: `random_data_and_hash(size)`,
  `random_data_and_digest(size)` and `new_silent_logger()` help with
  testing.

## Examples

Parsing a cache request path:

```python
from remotecache.http_cache import EntryKind, parse_request_url

hash_value = "fec3be77b8aa0d307ed840581ded3d114c86f36d4914c81e33a72877020c0603"
kind, key, instance = parse_request_url("prefix/ac/" + hash_value, True)
assert kind is EntryKind.AC
assert key == hash_value
assert instance == "prefix"
```

Validating an ActionResult:

```python
from remotecache.validate import ActionResult, OutputFile, ValidationError, validate_action_result

try:
    validate_action_result(ActionResult(output_files=[OutputFile(path="/abs")]))
except ValidationError as err:
    print("rejected:", err)
```

Reading credentials from gRPC metadata:

```python
from remotecache.basic_auth import get_login

print(get_login({":authority": ["user:password@localhost:9092"]}))
# ('user', 'password')
```

Printing help for the server's flags:

```python
import sys

from remotecache.flags import cli_flags
from remotecache.usage import print_help

print_help(sys.stdout, "bazel-remote", cli_flags())
```

Shutting down after a period without requests:

```python
import threading

from remotecache.idle import IdleTimer

stopped = threading.Event()
timer = IdleTimer(30.0)
timer.register(stopped)
timer.start()
# call timer.reset() whenever a request arrives
```

## What this package does not do

It contains no cache server and no command to start one. The following are
not included:

- HTTP or gRPC request handlers.
- Disk storage or eviction.
- Proxy backends.
- Protobuf serialisation of the ActionResult dataclasses.

`cli_flags()` describes the options, but nothing parses or acts on them.

## Tests

The tests use pytest. Install the `test` extra to get it.