# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for state surfaces."""

import json

import pytest

from debugconfigs import ConfigTreeStore, JsonFileState, MemoryState


class TestMemoryState:
    """Tests for MemoryState."""

    def test_get_update(self):
        state = MemoryState()
        assert state.get('k') is None
        assert state.get('k', 'd') == 'd'
        state.update('k', [1])
        assert state.get('k') == [1]
        state.update('k', None)
        assert state.keys() == []


class TestJsonFileState:
    """Tests for JsonFileState."""

    def test_missing_file(self, tmp_path):
        state = JsonFileState(tmp_path / 'state.json')
        assert state.get('k') is None

    def test_update_creates_file(self, tmp_path):
        path = tmp_path / 'sub' / 'state.json'
        state = JsonFileState(path)
        state.update('k', {'a': 1})
        state.update('other', 'x')
        assert json.loads(path.read_text(encoding='utf-8')) == {'k': {'a': 1}, 'other': 'x'}
        assert state.get('k') == {'a': 1}
        assert [p.name for p in path.parent.iterdir()] == ['state.json']

    def test_update_none_removes_key(self, tmp_path):
        state = JsonFileState(tmp_path / 'state.json')
        state.update('k', 1)
        state.update('k', None)
        assert state.get('k') is None

    def test_non_object_file(self, tmp_path):
        path = tmp_path / 'state.json'
        path.write_text('[1, 2]', encoding='utf-8')
        with pytest.raises(ValueError):
            JsonFileState(path).get('k')

    def test_store_round_trip_through_file(self, store, tmp_path):
        state = JsonFileState(tmp_path / 'state.json')
        store.state = state
        store.save_state()
        restored = ConfigTreeStore(state=state)
        assert restored.load_state() is True
        assert restored['environment.development.port'] == '3000'

    def test_corrupt_file_degrades(self, tmp_path):
        path = tmp_path / 'state.json'
        path.write_text('{broken', encoding='utf-8')
        store = ConfigTreeStore(state=JsonFileState(path))
        assert store.load_state() is False
        store.add_root_item('a')
        assert len(store) == 1
