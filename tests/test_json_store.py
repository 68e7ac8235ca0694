"""Unit tests for JsonFileStore."""
import json

import pytest

from storage.json_store import JsonFileStore, WorklistError


@pytest.fixture
def store():
    return JsonFileStore()


class TestJsonFileStore:
    """Test cases for JsonFileStore class."""

    def test_write_then_read(self, store, tmp_path):
        """Test writing and reading back records."""
        path = tmp_path / 'event_details.json'
        records = [{'id': 1, 'name': 'Café Meetup'}, {'id': 3, 'name': 'Panel'}]

        store.write_records(path, records)

        assert store.read_records(path) == records
        assert 'Café Meetup' in path.read_text(encoding='utf-8')
        assert path.read_text(encoding='utf-8').startswith('[\n  {')

    def test_write_replaces_previous_contents(self, store, tmp_path):
        """Test that each write overwrites rather than appends."""
        path = tmp_path / 'event_details.json'
        store.write_records(path, [{'id': 1}, {'id': 2}, {'id': 3}])
        store.write_records(path, [{'id': 1}])

        assert json.loads(path.read_text(encoding='utf-8')) == [{'id': 1}]
        assert [p.name for p in tmp_path.iterdir()] == ['event_details.json']

    def test_write_creates_parent_directory(self, store, tmp_path):
        path = tmp_path / 'data' / 'event_overviews.json'

        store.write_records(path, [])

        assert json.loads(path.read_text(encoding='utf-8')) == []

    def test_read_missing_file(self, store, tmp_path):
        """Test that a missing worklist raises WorklistError."""
        with pytest.raises(WorklistError):
            store.read_records(tmp_path / 'missing.json')

    def test_read_invalid_json(self, store, tmp_path):
        path = tmp_path / 'event_overviews.json'
        path.write_text('[{"name": ', encoding='utf-8')

        with pytest.raises(WorklistError):
            store.read_records(path)

    def test_read_non_array(self, store, tmp_path):
        path = tmp_path / 'event_overviews.json'
        path.write_text('{"events": []}', encoding='utf-8')

        with pytest.raises(WorklistError):
            store.read_records(path)
