"""
Unit tests for the codemate configuration system.
"""

from pathlib import Path

import pytest
import yaml

from codemate.config import (
    ChatConfig,
    Config,
    ConfigurationError,
    deep_merge,
    get_nested_value,
    load_config,
    load_yaml_file,
    set_nested_value,
)
from codemate.config.loader import _parse_env_value, apply_env_overrides
from codemate.storage import find_project_config, get_codemate_home, get_global_config_path


def write_yaml(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data), encoding="utf-8")


# =============================================================================
# Schema Tests
# =============================================================================


class TestConfigSchema:
    """Tests for the Config Pydantic schema."""

    def test_defaults(self):
        """Test the default configuration."""
        config = Config()
        assert config.providers.default == "gemini/gemini-2.0-flash"
        assert config.chat.enable_tools is True
        assert config.chat.max_history_turns == 10
        assert config.chat.system_prompt is None
        assert config.chat.request_timeout is None

    def test_resolve_alias(self):
        """Test alias resolution."""
        config = Config.model_validate({"providers": {"default": "gemini-1.5-pro"}})
        assert config.get_default_model() == "gemini/gemini-1.5-pro"
        assert Config().get_default_model() == "gemini/gemini-2.0-flash"

    def test_history_bounds(self):
        """Test max_history_turns must be positive."""
        with pytest.raises(ValueError):
            ChatConfig(max_history_turns=0)

    def test_timeout_must_be_positive(self):
        """Test request_timeout rejects zero."""
        with pytest.raises(ValueError):
            ChatConfig(request_timeout=0)


# =============================================================================
# Merger Tests
# =============================================================================


class TestMerger:
    """Tests for the merge helpers."""

    def test_deep_merge(self):
        """Test nested dicts are merged and scalars replaced."""
        base = {"chat": {"enable_tools": True, "max_history_turns": 10}, "x": 1}
        override = {"chat": {"max_history_turns": 4}, "x": 2}

        assert deep_merge(base, override) == {
            "chat": {"enable_tools": True, "max_history_turns": 4},
            "x": 2,
        }

    def test_none_removes_key(self):
        """Test a null override drops the key."""
        assert deep_merge({"a": 1, "b": 2}, {"a": None}) == {"b": 2}

    def test_merge_does_not_mutate_base(self):
        """Test the base dict is left untouched."""
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"c": 2}})
        assert base == {"a": {"b": 1}}

    def test_nested_values(self):
        """Test getting and setting dotted keys."""
        config: dict = {}
        set_nested_value(config, "chat.enable_tools", False)

        assert config == {"chat": {"enable_tools": False}}
        assert get_nested_value(config, "chat.enable_tools") is False
        assert get_nested_value(config, "chat.missing") is None


# =============================================================================
# Loader Tests
# =============================================================================


class TestLoadYaml:
    """Tests for load_yaml_file."""

    def test_missing_file(self, temp_dir: Path):
        """Test a missing file loads as empty."""
        assert load_yaml_file(temp_dir / "nope.yaml") == {}

    def test_empty_file(self, temp_dir: Path):
        """Test an empty file loads as empty."""
        path = temp_dir / "empty.yaml"
        path.write_text("")
        assert load_yaml_file(path) == {}

    def test_invalid_yaml(self, temp_dir: Path):
        """Test broken YAML raises ConfigurationError."""
        path = temp_dir / "bad.yaml"
        path.write_text("chat: [unclosed")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_yaml_file(path)

    def test_non_mapping(self, temp_dir: Path):
        """Test a top-level list is rejected."""
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_yaml_file(path)


class TestEnvOverrides:
    """Tests for CODEMATE_* environment overrides."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("42", 42), ("-3", -3), ("0.5", 0.5), ("true", True), ("off", False), ("gemini/x", "gemini/x")],
    )
    def test_parse_env_value(self, raw, expected):
        """Test environment values are typed."""
        assert _parse_env_value(raw) == expected

    def test_apply_overrides(self, monkeypatch: pytest.MonkeyPatch, codemate_home: Path):
        """Test section and key are split on the first underscore."""
        monkeypatch.setenv("CODEMATE_CHAT_MAX_HISTORY_TURNS", "6")
        monkeypatch.setenv("CODEMATE_PROVIDERS_DEFAULT", "openai/gpt-4o")

        config = apply_env_overrides({})

        assert config == {
            "chat": {"max_history_turns": 6},
            "providers": {"default": "openai/gpt-4o"},
        }

    def test_home_is_not_an_override(self, codemate_home: Path):
        """Test CODEMATE_HOME is ignored as a setting."""
        assert apply_env_overrides({}) == {}


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_only(self, codemate_home: Path, project_dir: Path):
        """Test loading with no files present."""
        config = load_config()
        assert config == Config()

    def test_layering(self, codemate_home: Path, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        """Test global, project and environment layers apply in order."""
        write_yaml(
            codemate_home / "config.yaml",
            {"providers": {"default": "gemini-1.5-pro", "temperature": 0.1}, "chat": {"max_history_turns": 20}},
        )
        write_yaml(project_dir / ".codemate" / "project.yaml", {"chat": {"max_history_turns": 6}})
        monkeypatch.setenv("CODEMATE_CHAT_ENABLE_TOOLS", "false")

        config = load_config()

        assert config.providers.default == "gemini-1.5-pro"
        assert config.providers.temperature == 0.1
        assert config.chat.max_history_turns == 6
        assert config.chat.enable_tools is False

    def test_project_found_from_subdirectory(self, codemate_home: Path, project_dir: Path):
        """Test the project file is found by walking up."""
        write_yaml(project_dir / ".codemate" / "project.yaml", {"chat": {"system_prompt": "Be terse."}})
        nested = project_dir / "src" / "pkg"
        nested.mkdir(parents=True)

        config = load_config(project_path=nested)

        assert config.chat.system_prompt == "Be terse."

    def test_skip_sources(self, codemate_home: Path, project_dir: Path, monkeypatch: pytest.MonkeyPatch):
        """Test project and environment layers can be skipped."""
        write_yaml(project_dir / ".codemate" / "project.yaml", {"chat": {"max_history_turns": 6}})
        monkeypatch.setenv("CODEMATE_CHAT_ENABLE_TOOLS", "false")

        config = load_config(skip_project=True, skip_env=True)

        assert config.chat.max_history_turns == 10
        assert config.chat.enable_tools is True

    def test_invalid_values(self, codemate_home: Path, project_dir: Path):
        """Test validation failures raise ConfigurationError."""
        write_yaml(codemate_home / "config.yaml", {"chat": {"max_history_turns": 0}})

        with pytest.raises(ConfigurationError, match="validation failed"):
            load_config()


class TestPaths:
    """Tests for path helpers."""

    def test_home_from_env(self, codemate_home: Path):
        """Test CODEMATE_HOME relocates the home directory."""
        assert get_codemate_home() == codemate_home.resolve()
        assert get_global_config_path() == codemate_home.resolve() / "config.yaml"

    def test_home_default(self, monkeypatch: pytest.MonkeyPatch):
        """Test the default home is ~/.codemate."""
        monkeypatch.delenv("CODEMATE_HOME", raising=False)
        assert get_codemate_home() == Path.home() / ".codemate"

    def test_find_project_config_missing(self, temp_dir: Path):
        """Test None is returned when no project file exists."""
        lonely = temp_dir / "lonely"
        lonely.mkdir()
        assert find_project_config(lonely) is None
