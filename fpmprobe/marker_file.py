"""
Parsing and rewriting of the marker line inside a probe's backing file.

The backing file is read in binary, one line at a time, with each read capped
at LINE_FRAGMENT_SIZE bytes. A line longer than that comes back as several
fragments; the marker line is short so this never splits it in practice, and
joining the fragments always reproduces the file exactly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import MalformedMarkerError, MarkerNotFoundError

LINE_FRAGMENT_SIZE = 1000

_ENDING_RE = re.compile(rb"(\r\n|\n|\r)?\Z")


@dataclass(frozen=True)
class MarkerSpec:
    """How the marker line is recognised and re-rendered."""

    declaration: str = "define('VALUE'"
    template: str = "define('VALUE', \"{value}\");"
    values: Tuple[str, str] = ("foo", "bar")

    def __post_init__(self):
        if len(self.values) != 2 or self.values[0] == self.values[1]:
            raise ValueError(f"a marker needs exactly two distinct values, got {self.values!r}")

    @property
    def pattern(self) -> re.Pattern:
        return re.compile(b"^" + re.escape(self.declaration.encode()))

    def flip(self, value: str) -> str:
        first, second = self.values
        if value == first:
            return second
        if value == second:
            return first
        raise ValueError(f"{value!r} is not one of {self.values!r}")

    def render(self, value: str) -> bytes:
        return self.template.format(value=value).encode()


DEFAULT_SPEC = MarkerSpec()


def read_lines(path: Path) -> List[bytes]:
    lines = []
    with open(path, "rb") as fh:
        while True:
            line = fh.readline(LINE_FRAGMENT_SIZE)
            if not line:
                break
            lines.append(line)
    return lines


def _current_value(line: bytes, spec: MarkerSpec) -> Optional[str]:
    for value in spec.values:
        if value.encode() in line:
            return value
    return None


def find_marker(lines: List[bytes], spec: MarkerSpec = DEFAULT_SPEC, path=None) -> str:
    """Return the value declared on the first marker line."""
    pattern = spec.pattern
    for line in lines:
        if pattern.match(line):
            value = _current_value(line, spec)
            if value is None:
                raise MalformedMarkerError(path, line.decode(errors="replace"), spec.values)
            return value
    raise MarkerNotFoundError(path, spec.declaration)


def rewrite(lines: List[bytes], spec: MarkerSpec, new_value: str) -> bytes:
    """Rebuild the file content with every marker line declaring new_value."""
    pattern = spec.pattern
    rendered = spec.render(new_value)
    out = []
    for line in lines:
        if pattern.match(line):
            ending = _ENDING_RE.search(line).group(1) or b""
            line = rendered + ending
        out.append(line)
    return b"".join(out)


def render_backing_file(value: str, spec: MarkerSpec = DEFAULT_SPEC) -> bytes:
    """Content for a freshly created backing file.

    The default spec gets a PHP wrapper so php-fpm can serve the file
    directly; any other spec gets the bare marker line.
    """
    if spec != DEFAULT_SPEC:
        return spec.render(value) + b"\n"
    header = (
        "<?php\n"
        "/**\n"
        " * Opcode-cache freshness probe. Every toggle flips VALUE between\n"
        f" * '{spec.values[0]}' and '{spec.values[1]}'. A caller that keeps seeing the same\n"
        " * value is being served a stale cached copy of this file.\n"
        " */\n"
    )
    footer = "echo VALUE.\"\\n\";\n"
    return header.encode() + spec.render(value) + b"\n" + footer.encode()
