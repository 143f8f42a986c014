"""Unit tests for bucket configuration loading."""

import sys
from pathlib import Path

import pytest

# Add repo root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from rbucket.config import BucketConfig, load_config


# =============================================================================
# BucketConfig.from_dict
# =============================================================================

class TestFromDict:
    """Test building BucketConfig from mappings."""

    def test_empty_uses_defaults(self):
        assert BucketConfig.from_dict(None) == BucketConfig(100, 100)
        assert BucketConfig.from_dict({}) == BucketConfig(100, 100)

    def test_bucket_section(self):
        """Test the 'bucket' section is read."""
        config = BucketConfig.from_dict({"bucket": {"items_limit": 5, "history_limit": 6}})

        assert config.items_limit == 5
        assert config.history_limit == 6

    def test_bare_section(self):
        """Test the section itself is accepted."""
        config = BucketConfig.from_dict({"items_limit": 3})

        assert config.items_limit == 3
        assert config.history_limit == 100

    def test_numeric_strings_accepted(self):
        config = BucketConfig.from_dict({"bucket": {"items_limit": "12"}})
        assert config.items_limit == 12

    def test_zero_and_negative_accepted(self):
        """Test degenerate limits pass through like the core allows."""
        config = BucketConfig.from_dict({"bucket": {"items_limit": 0, "history_limit": -2}})

        assert config.items_limit == 0
        assert config.history_limit == -2

    @pytest.mark.parametrize("value", ["lots", None, True, [1], 2.5, "2.5", float("nan")])
    def test_invalid_limit_raises(self, value):
        with pytest.raises(ValueError, match="bucket.items_limit"):
            BucketConfig.from_dict({"bucket": {"items_limit": value}})

    def test_integral_float_accepted(self):
        """Test a float with no fractional part is taken as that integer."""
        config = BucketConfig.from_dict({"bucket": {"history_limit": 3.0}})

        assert config.history_limit == 3
        assert isinstance(config.history_limit, int)

    def test_non_mapping_section_raises(self):
        with pytest.raises(ValueError, match="'bucket' must be a mapping"):
            BucketConfig.from_dict({"bucket": [1, 2]})

    def test_config_is_frozen(self):
        config = BucketConfig()
        with pytest.raises(AttributeError):
            config.items_limit = 1


# =============================================================================
# Environment overrides
# =============================================================================

class TestEnvOverrides:
    """Test RBUCKET_* overrides."""

    def test_no_env_returns_same(self):
        config = BucketConfig(items_limit=5)
        assert config.with_env_overrides({}) is config

    def test_env_overrides_applied(self):
        config = BucketConfig(items_limit=5, history_limit=6).with_env_overrides(
            {"RBUCKET_ITEMS_LIMIT": "50", "RBUCKET_HISTORY_LIMIT": " 60 "}
        )

        assert config == BucketConfig(items_limit=50, history_limit=60)

    def test_blank_env_ignored(self):
        config = BucketConfig(items_limit=5).with_env_overrides({"RBUCKET_ITEMS_LIMIT": ""})
        assert config.items_limit == 5

    def test_invalid_env_raises(self):
        with pytest.raises(ValueError):
            BucketConfig().with_env_overrides({"RBUCKET_HISTORY_LIMIT": "many"})

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("RBUCKET_ITEMS_LIMIT", "7")
        assert BucketConfig().with_env_overrides().items_limit == 7


# =============================================================================
# load_config
# =============================================================================

class TestLoadConfig:
    """Test YAML loading."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_load_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RBUCKET_ITEMS_LIMIT", raising=False)
        monkeypatch.delenv("RBUCKET_HISTORY_LIMIT", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("bucket:\n  items_limit: 10\n  history_limit: 20\n", encoding="utf-8")

        config = load_config(str(path))

        assert config == BucketConfig(items_limit=10, history_limit=20)

    def test_empty_yaml_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RBUCKET_ITEMS_LIMIT", raising=False)
        monkeypatch.delenv("RBUCKET_HISTORY_LIMIT", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(str(path)) == BucketConfig()

    def test_env_applied_on_load(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RBUCKET_HISTORY_LIMIT", "3")
        path = tmp_path / "config.yaml"
        path.write_text("bucket:\n  history_limit: 20\n", encoding="utf-8")

        assert load_config(str(path)).history_limit == 3
        assert load_config(str(path), apply_env=False).history_limit == 20

    def test_example_config_loads(self, monkeypatch):
        """Test the shipped example config parses to the defaults."""
        monkeypatch.delenv("RBUCKET_ITEMS_LIMIT", raising=False)
        monkeypatch.delenv("RBUCKET_HISTORY_LIMIT", raising=False)
        example = Path(__file__).resolve().parents[2] / "config.example.yaml"
        assert example.exists(), "config.example.yaml is shipped with the package"

        assert load_config(str(example)) == BucketConfig()

    def test_fractional_limit_in_yaml_raises(self, tmp_path):
        """Test a fractional YAML limit is rejected rather than truncated."""
        path = tmp_path / "config.yaml"
        path.write_text("bucket:\n  items_limit: 2.5\n", encoding="utf-8")

        with pytest.raises(ValueError, match="got 2.5"):
            load_config(str(path), apply_env=False)
