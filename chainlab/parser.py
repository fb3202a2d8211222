"""Event log reader.

Each log line carries one event in the form

    <any prefix>{executor: 0, chain: 3, callback: 7, start: 1200, duration: 40}

The prefix (timestamps and the like written by the logging harness) is
dropped up to the first ``{``. The rest is tokenized field by field so that a
missing or malformed field is reported by name instead of producing a partial
match.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from chainlab.model import Event
from chainlab.validate import FormatError

MAX_LINE_BYTES = 4096

# Every field is a signed 64-bit integer in the log producer.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_RE = re.compile(r"[+-]?\d+")
_NON_NEGATIVE = ("duration",)


@dataclass(frozen=True)
class EventSchema:
    name: str
    fields: tuple[str, ...]


CALLBACK_SCHEMA = EventSchema(
    name="callback",
    fields=("executor", "chain", "callback", "start", "duration"),
)
MEASURED_SCHEMA = EventSchema(
    name="measured",
    fields=("executor", "chain", "start", "duration"),
)
SCHEMAS = {s.name: s for s in (CALLBACK_SCHEMA, MEASURED_SCHEMA)}


def _parse_field(token: str, expected: str) -> int:
    key, sep, value = token.partition(":")
    key = key.strip()
    if not sep:
        raise FormatError(f"field '{expected}' is malformed: {token.strip()!r}")
    if key != expected:
        raise FormatError(f"expected field '{expected}', found '{key}'")
    value = value.strip()
    if not _INT_RE.fullmatch(value):
        raise FormatError(f"field '{expected}' is not an integer: {value!r}")
    n = int(value)
    if not INT64_MIN <= n <= INT64_MAX:
        raise FormatError(f"field '{expected}' is out of 64-bit range: {value}")
    if expected in _NON_NEGATIVE and n < 0:
        raise FormatError(f"field '{expected}' must be >= 0 (got {n})")
    return n


def parse_event_line(line: str, *, schema: EventSchema = CALLBACK_SCHEMA) -> Event:
    brace = line.find("{")
    if brace < 0:
        raise FormatError("opening delimiter '{' not found")

    body = line[brace:].rstrip()
    if not body.endswith("}"):
        raise FormatError("closing delimiter '}' not found")

    inner = body[1:-1]
    tokens = inner.split(",") if inner.strip() else []
    values: dict[str, int] = {}
    for i, expected in enumerate(schema.fields):
        if i >= len(tokens):
            raise FormatError(f"missing field '{expected}'")
        values[expected] = _parse_field(tokens[i], expected)
    if len(tokens) > len(schema.fields):
        raise FormatError(
            f"unexpected trailing content after '{schema.fields[-1]}': "
            f"{','.join(tokens[len(schema.fields):]).strip()!r}"
        )

    return Event(
        executor=values["executor"],
        chain=values["chain"],
        callback=values.get("callback"),
        start_us=values["start"],
        duration_us=values["duration"],
    )


def read_events(
    path: Path,
    *,
    schema: EventSchema = CALLBACK_SCHEMA,
    max_line_bytes: int = MAX_LINE_BYTES,
) -> list[Event]:
    """Parse every line of an event log, in file order.

    The first line that cannot be parsed aborts the whole read with a
    FormatError naming the file and the 1-based line number.
    """

    events: list[Event] = []
    with Path(path).open("rb") as f:
        line_no = 0
        while True:
            # Room for a full line plus its CRLF terminator; anything beyond is too long.
            raw = f.readline(max_line_bytes + 2)
            if not raw:
                break
            line_no += 1
            if len(raw.rstrip(b"\r\n")) > max_line_bytes:
                raise FormatError(
                    f"line too long for parser (limit {max_line_bytes} bytes)",
                    path=path,
                    line_no=line_no,
                )
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise FormatError(
                    f"not valid UTF-8: {e.reason}", path=path, line_no=line_no
                ) from e
            try:
                events.append(parse_event_line(text.rstrip("\r\n"), schema=schema))
            except FormatError as e:
                raise e.located(path=path, line_no=line_no) from e
    return events
