"""
Configuration Tests
"""

import pytest

from mindgraph.config import EngineConfig, HistoryConfig, LayoutConfig, StorageConfig


class TestEngineConfig:

    def test_defaults_filled(self):
        config = EngineConfig()
        assert config.layout == LayoutConfig()
        assert config.storage.backend_type == "memory"
        assert config.storage.debounce_seconds == 0.5
        assert config.history.max_snapshots is None
        assert config.templates.layout_delay == 0.15
        assert config.nodes.initial_label == "Central Idea"

    def test_partial_override(self):
        config = EngineConfig(layout=LayoutConfig(row_spacing=60))
        assert config.layout.row_spacing == 60
        assert config.layout.column_spacing == 280.0

    def test_invalid_sections(self):
        with pytest.raises(ValueError):
            StorageConfig(backend_type="redis")
        with pytest.raises(ValueError):
            StorageConfig(debounce_seconds=-0.1)
        with pytest.raises(ValueError):
            HistoryConfig(max_snapshots=0)
        with pytest.raises(ValueError, match="storage_dir"):
            StorageConfig(backend_type="file")


class TestFromEnv:

    def test_empty_environment(self):
        config = EngineConfig.from_env({})
        assert config.storage.backend_type == "memory"
        assert config.history.max_snapshots is None

    def test_storage_dir_implies_file_backend(self):
        config = EngineConfig.from_env({"MINDGRAPH_STORAGE_DIR": "/tmp/boards"})
        assert config.storage.backend_type == "file"
        assert config.storage.storage_dir == "/tmp/boards"

    def test_explicit_backend_wins(self):
        config = EngineConfig.from_env({
            "MINDGRAPH_STORAGE_DIR": "/tmp/boards",
            "MINDGRAPH_STORAGE_BACKEND": "memory",
        })
        assert config.storage.backend_type == "memory"

    def test_file_backend_without_dir_rejected(self):
        with pytest.raises(ValueError, match="storage_dir"):
            EngineConfig.from_env({"MINDGRAPH_STORAGE_BACKEND": "file"})

    def test_debounce_and_history(self):
        config = EngineConfig.from_env({
            "MINDGRAPH_AUTOSAVE_DEBOUNCE_MS": "250",
            "MINDGRAPH_HISTORY_LIMIT": "40",
        })
        assert config.storage.debounce_seconds == 0.25
        assert config.history.max_snapshots == 40

    def test_bad_integer(self):
        with pytest.raises(ValueError, match="MINDGRAPH_HISTORY_LIMIT"):
            EngineConfig.from_env({"MINDGRAPH_HISTORY_LIMIT": "lots"})
