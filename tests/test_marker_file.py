"""Tests for marker line parsing and rewriting."""

import pytest

from fpmprobe.errors import MalformedMarkerError, MarkerNotFoundError
from fpmprobe.marker_file import (
    DEFAULT_SPEC,
    LINE_FRAGMENT_SIZE,
    MarkerSpec,
    find_marker,
    read_lines,
    render_backing_file,
    rewrite,
)


def _write(tmp_path, content: bytes):
    path = tmp_path / "probe.php"
    path.write_bytes(content)
    return path


class TestReadLines:
    def test_joined_lines_reproduce_file(self, tmp_path):
        content = b"<?php\r\ndefine('VALUE', \"bar\");\nno newline at end"
        path = _write(tmp_path, content)
        assert b"".join(read_lines(path)) == content

    def test_long_lines_come_back_in_fragments(self, tmp_path):
        long_line = b"x" * (LINE_FRAGMENT_SIZE * 2 + 10) + b"\n"
        path = _write(tmp_path, long_line + b"define('VALUE', \"foo\");\n")
        lines = read_lines(path)
        assert len(lines) == 4
        assert all(len(line) <= LINE_FRAGMENT_SIZE for line in lines)
        assert find_marker(lines) == "foo"


class TestFindMarker:
    def test_reads_current_value(self):
        assert find_marker([b"<?php\n", b"define('VALUE', \"bar\");\n"]) == "bar"

    def test_indented_declaration_is_not_a_marker(self):
        with pytest.raises(MarkerNotFoundError):
            find_marker([b"  define('VALUE', \"bar\");\n"])

    def test_missing_marker_raises(self):
        with pytest.raises(MarkerNotFoundError):
            find_marker([b"<?php\n", b"echo 1;\n"], path="probe.php")

    def test_marker_without_known_value_raises(self):
        with pytest.raises(MalformedMarkerError) as exc:
            find_marker([b"define('VALUE', \"baz\");\n"])
        assert "baz" in exc.value.line

    def test_marker_errors_are_lookup_errors(self):
        with pytest.raises(LookupError):
            find_marker([])


class TestRewrite:
    def test_replaces_only_the_marker_line(self):
        lines = [b"<?php\n", b"define('VALUE', \"bar\");\n", b"echo VALUE;\n"]
        out = rewrite(lines, DEFAULT_SPEC, "foo")
        assert out == b"<?php\ndefine('VALUE', \"foo\");\necho VALUE;\n"

    def test_keeps_line_endings(self):
        lines = [b"a\r\n", b"define('VALUE', \"foo\");\r\n", b"b\r\n"]
        assert rewrite(lines, DEFAULT_SPEC, "bar") == b"a\r\ndefine('VALUE', \"bar\");\r\nb\r\n"

    def test_marker_on_last_line_without_newline(self):
        lines = [b"a\n", b"define('VALUE', \"foo\");"]
        assert rewrite(lines, DEFAULT_SPEC, "bar") == b"a\ndefine('VALUE', \"bar\");"

    def test_every_marker_line_gets_the_new_value(self):
        lines = [b"define('VALUE', \"foo\");\n", b"define('VALUE', \"bar\");\n"]
        out = rewrite(lines, DEFAULT_SPEC, "bar")
        assert out.count(b"\"bar\"") == 2


class TestMarkerSpec:
    def test_flip(self):
        assert DEFAULT_SPEC.flip("foo") == "bar"
        assert DEFAULT_SPEC.flip("bar") == "foo"

    def test_flip_unknown_value(self):
        with pytest.raises(ValueError):
            DEFAULT_SPEC.flip("baz")

    def test_values_must_be_distinct(self):
        with pytest.raises(ValueError):
            MarkerSpec(values=("on", "on"))

    def test_custom_spec(self):
        spec = MarkerSpec(declaration="VALUE =", template='VALUE = "{value}"', values=("on", "off"))
        lines = [b"# probe state\n", b'VALUE = "off"\n']
        assert find_marker(lines, spec) == "off"
        assert rewrite(lines, spec, "on") == b'# probe state\nVALUE = "on"\n'

    def test_render_backing_file(self):
        content = render_backing_file("bar")
        assert content.startswith(b"<?php\n")
        assert b"define('VALUE', \"bar\");\n" in content
