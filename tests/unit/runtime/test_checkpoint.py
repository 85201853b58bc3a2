"""Unit tests for CheckpointStore."""

import json

import pytest

from multisend.core import CheckpointIOError
from multisend.runtime import CheckpointStore

SESSION = "a" * 64
OTHER_SESSION = "b" * 64


class TestCheckpointStore:
    """Test persistence of confirmed keys."""

    def test_missing_file_starts_empty(self, tmp_path):
        """A missing file means nothing is confirmed yet."""
        store = CheckpointStore(tmp_path / "cp.json")
        store.load()
        assert store.confirmed(SESSION) == frozenset()

    def test_record_persists_across_instances(self, tmp_path):
        """Recorded keys survive a new store instance."""
        path = tmp_path / "cp.json"
        store = CheckpointStore(path)
        store.load()
        assert store.record(SESSION, ["0xA|1", "0xB|2"]) == 2

        reloaded = CheckpointStore(path)
        reloaded.load()
        assert reloaded.confirmed(SESSION) == {"0xA|1", "0xB|2"}
        assert reloaded.confirmed(OTHER_SESSION) == frozenset()

    def test_document_format(self, tmp_path):
        """The file maps session ids to ordered sentKeys lists."""
        path = tmp_path / "cp.json"
        store = CheckpointStore(path)
        store.load()
        store.record(SESSION, ["0xA|1"])
        store.record(SESSION, ["0xB|2"])

        assert json.loads(path.read_text()) == {SESSION: {"sentKeys": ["0xA|1", "0xB|2"]}}
        assert not (tmp_path / "cp.json.tmp").exists()

    def test_keys_only_grow(self, tmp_path):
        """Re-recording keys is a no-op and never removes anything."""
        store = CheckpointStore(tmp_path / "cp.json")
        store.load()
        store.record(SESSION, ["0xA|1", "0xB|2"])

        assert store.record(SESSION, ["0xB|2", "0xC|3"]) == 1
        assert store.confirmed(SESSION) == {"0xA|1", "0xB|2", "0xC|3"}

    def test_other_sessions_are_preserved(self, tmp_path):
        """Rewriting the file keeps sessions this run did not touch."""
        path = tmp_path / "cp.json"
        path.write_text(json.dumps({OTHER_SESSION: {"sentKeys": ["0xZ|9"]}}))

        store = CheckpointStore(path)
        store.load()
        store.record(SESSION, ["0xA|1"])

        document = json.loads(path.read_text())
        assert document[OTHER_SESSION] == {"sentKeys": ["0xZ|9"]}
        assert document[SESSION] == {"sentKeys": ["0xA|1"]}

    @pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
    def test_unreadable_file_starts_fresh(self, tmp_path, content):
        """A corrupt document is treated as empty."""
        path = tmp_path / "cp.json"
        path.write_text(content)

        store = CheckpointStore(path)
        store.load()

        assert store.confirmed(SESSION) == frozenset()

    @pytest.mark.parametrize("sent_keys", [None, "0xZ|9", {"0xZ|9": True}])
    def test_malformed_session_is_treated_as_empty(self, tmp_path, sent_keys):
        """A session whose sentKeys is not a list is ignored; valid sessions still load."""
        path = tmp_path / "cp.json"
        path.write_text(
            json.dumps({OTHER_SESSION: {"sentKeys": sent_keys}, SESSION: {"sentKeys": ["0xA|1"]}})
        )

        store = CheckpointStore(path)
        store.load()

        assert store.confirmed(SESSION) == {"0xA|1"}
        assert store.confirmed(OTHER_SESSION) == frozenset()

        store.record(OTHER_SESSION, ["0xB|2"])
        assert json.loads(path.read_text())[OTHER_SESSION] == {"sentKeys": ["0xB|2"]}

    def test_disabled_store_never_touches_disk(self, tmp_path):
        """A disabled store ignores existing checkpoints and writes nothing."""
        path = tmp_path / "cp.json"
        path.write_text(json.dumps({SESSION: {"sentKeys": ["0xA|1"]}}))

        store = CheckpointStore(path, enabled=False)
        store.load()

        assert store.confirmed(SESSION) == frozenset()
        assert store.record(SESSION, ["0xB|2"]) == 0
        assert json.loads(path.read_text()) == {SESSION: {"sentKeys": ["0xA|1"]}}

    def test_write_failure_raises_checkpoint_error(self, tmp_path):
        """An unwritable location raises CheckpointIOError but keeps memory state."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = CheckpointStore(blocker / "cp.json")
        store.load()

        with pytest.raises(CheckpointIOError) as exc_info:
            store.record(SESSION, ["0xA|1"])

        assert exc_info.value.path == str(blocker / "cp.json")
        assert store.confirmed(SESSION) == {"0xA|1"}

    def test_creates_parent_directories(self, tmp_path):
        """Missing parent directories are created on first write."""
        path = tmp_path / "nested" / "dir" / "cp.json"
        store = CheckpointStore(path)
        store.load()
        store.record(SESSION, ["0xA|1"])
        assert path.exists()
