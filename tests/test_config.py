"""
Tests for table configuration
"""

import logging

import pytest

from perfect_hasher import (
    AssociativeIdentifierTable,
    ConstantHasher,
    HashType,
    IdentifierTable,
    IdentifierWidth,
    MurmurHasher,
    TableConfig,
    load_config,
    merge_sum,
)


class TestLoadConfig:
    def test_defaults(self):
        config = load_config({})
        assert config == TableConfig()
        assert config.width is IdentifierWidth.U64
        assert config.hash_type is HashType.MURMUR3
        assert config.accumulate_state is False
        assert config.detect_cycles is True

    def test_reads_environment(self):
        config = load_config({
            "PERFECT_HASHER_WIDTH": "u16",
            "PERFECT_HASHER_HASH_TYPE": "SHA256",
            "PERFECT_HASHER_SEED": "0x10",
            "PERFECT_HASHER_CAPACITY": "1000",
            "PERFECT_HASHER_ACCUMULATE_STATE": "yes",
            "PERFECT_HASHER_DETECT_CYCLES": "0",
            "PERFECT_HASHER_ENABLE_LOGGING": "true",
        })
        assert config.width is IdentifierWidth.U16
        assert config.hash_type is HashType.SHA256
        assert config.seed == 16
        assert config.capacity == 1000
        assert config.accumulate_state is True
        assert config.detect_cycles is False
        assert config.enable_logging is True

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("PERFECT_HASHER_WIDTH", "8")
        assert load_config().width is IdentifierWidth.U8

    @pytest.mark.parametrize("env", [
        {"PERFECT_HASHER_WIDTH": "u7"},
        {"PERFECT_HASHER_HASH_TYPE": "md5"},
        {"PERFECT_HASHER_SEED": "forty-two"},
        {"PERFECT_HASHER_CAPACITY": "lots"},
    ])
    def test_invalid_values(self, env):
        with pytest.raises(ValueError):
            load_config(env)


class TestFromConfig:
    def test_identifier_table(self):
        config = TableConfig(width=IdentifierWidth.U8, hash_type=HashType.CONSTANT, seed=0)
        table = IdentifierTable.from_config(config)
        assert isinstance(table.hasher, ConstantHasher)
        assert table.assign('b').raw == 0
        assert table.assign('a').raw == 255

    def test_associative_table(self):
        config = TableConfig(capacity=10, accumulate_state=True)
        table = AssociativeIdentifierTable.from_config(config, merge=merge_sum)
        assert isinstance(table.hasher, MurmurHasher)
        assert table.capacity == 10
        assert table.accumulate_state is True
        assert table.merge is merge_sum


class TestApplyLogging:
    @pytest.fixture
    def basic_config_calls(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        monkeypatch.setattr(logging.getLogger(), "handlers", [])
        return calls

    def test_enabled_configures_info_logging(self, basic_config_calls):
        TableConfig(enable_logging=True).apply_logging()
        assert basic_config_calls == [{"level": logging.INFO}]

    def test_disabled_leaves_logging_alone(self, basic_config_calls):
        TableConfig().apply_logging()
        assert basic_config_calls == []

    def test_existing_handlers_are_kept(self, basic_config_calls, monkeypatch):
        monkeypatch.setattr(logging.getLogger(), "handlers", [logging.NullHandler()])
        TableConfig(enable_logging=True).apply_logging()
        assert basic_config_calls == []

    def test_from_config_applies_logging(self, basic_config_calls):
        IdentifierTable.from_config(TableConfig(enable_logging=True))
        assert basic_config_calls == [{"level": logging.INFO}]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
