"""Tests for the freshness check."""

import sys
from pathlib import Path

import pytest

from fpmprobe.errors import ProbeCommandError
from fpmprobe.freshness import check_alternation, observe, run_probe

REPO = Path(__file__).resolve().parents[1]
PYTHON = sys.executable


class TestCheckAlternation:
    def test_alternating_is_fresh(self):
        report = check_alternation(["foo", "bar", "foo", "bar"])
        assert report.is_fresh
        assert report.repeats == 0
        assert report.summary().startswith("FRESH")

    def test_repeat_is_stale(self):
        report = check_alternation(["foo", "bar", "bar", "bar", "foo"])
        assert not report.is_fresh
        assert report.repeat_indices == [2, 3]
        assert report.summary().startswith("STALE: 5 observations, 2 repeat(s)")

    def test_short_sequences_are_fresh(self):
        assert check_alternation([]).is_fresh
        assert check_alternation(["foo"]).is_fresh


class TestRunProbe:
    def test_returns_stripped_stdout(self):
        assert run_probe([PYTHON, "-c", "print('foo')"]) == "foo"

    def test_missing_executable_raises(self, tmp_path):
        with pytest.raises(ProbeCommandError) as exc:
            run_probe([str(tmp_path / "no-such-command")])
        assert exc.value.returncode == -1
        assert "no-such-command" in str(exc.value)

    def test_non_zero_exit_raises(self):
        with pytest.raises(ProbeCommandError) as exc:
            run_probe([PYTHON, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"])
        assert exc.value.returncode == 3
        assert "boom" in exc.value.stderr


class TestObserve:
    def test_constant_output_is_stale(self):
        report = observe([PYTHON, "-c", "print('bar')"], count=3)
        assert not report.is_fresh
        assert report.values == ["bar", "bar", "bar"]

    def test_toggle_probe_is_fresh(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FPMPROBE_STATE_DIR", str(tmp_path / "state"))
        from fpmprobe.toggle import create_backing_file
        path = create_backing_file(tmp_path / "probe.php")
        command = [PYTHON, str(REPO / "bin" / "toggle_probe.py"), str(path), "--no-history"]
        report = observe(command, count=4)
        assert report.is_fresh
        assert report.values == ["foo", "bar", "foo", "bar"]

    def test_count_must_be_positive(self):
        with pytest.raises(ValueError):
            observe([PYTHON, "-c", "print('foo')"], count=0)
