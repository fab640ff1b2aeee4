import pytest
from unittest.mock import patch


@pytest.fixture(autouse=True)
def isolated_state(tmp_path):
    """Use a fresh state directory and SQLite DB for each test."""
    state_dir = tmp_path / "state"
    with (
        patch("fpmprobe.storage.STATE_DIR", state_dir),
        patch("fpmprobe.storage.DB_PATH", state_dir / "history.db"),
        patch("fpmprobe.storage.LOG_PATH", state_dir / "probe.log"),
    ):
        yield state_dir
