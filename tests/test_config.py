"""Tests for haxai.config: EngineConfig and validation."""

from pathlib import Path

import pytest
import yaml
from knack.util import CLIError

from haxai.config import DEFAULT_CONFIG, EngineConfig, default_config_dir


class TestDefaultConfigDir:

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HAX_AI_HOME", str(tmp_path / "home"))
        assert default_config_dir() == tmp_path / "home"

    def test_home_default(self):
        assert default_config_dir() == Path.home() / ".hax-ai"


class TestEngineConfig:

    def test_load_without_file_uses_defaults(self, tmp_path):
        config = EngineConfig(tmp_path)
        assert config.load() == DEFAULT_CONFIG
        assert not config.exists()

    def test_create_default_with_overrides(self, tmp_path):
        config = EngineConfig(tmp_path)
        result = config.create_default({"ai": {"provider": "openai"}, "engine": {"history_limit": 4}})

        assert result["ai"]["provider"] == "openai"
        assert result["engine"]["history_limit"] == 4
        assert config.exists()
        on_disk = yaml.safe_load(config.config_path.read_text(encoding="utf-8"))
        assert on_disk["ai"]["provider"] == "openai"

    def test_api_key_goes_to_secrets_file(self, tmp_path):
        config = EngineConfig(tmp_path)
        config.create_default({"ai": {"provider": "openai", "api_key": "sk-secret"}})

        main = yaml.safe_load(config.config_path.read_text(encoding="utf-8"))
        secrets = yaml.safe_load(config.secrets_path.read_text(encoding="utf-8"))
        assert "api_key" not in main["ai"]
        assert secrets == {"ai": {"api_key": "sk-secret"}}

        reloaded = EngineConfig(tmp_path)
        reloaded.load()
        assert reloaded.get("ai.api_key") == "sk-secret"

    def test_no_secrets_file_without_key(self, tmp_path):
        config = EngineConfig(tmp_path)
        config.create_default({})
        assert not config.secrets_path.exists()

    def test_load_merges_file_over_defaults(self, tmp_path):
        (tmp_path / "hax-ai.yaml").write_text("resources:\n  max_documents: 3\n", encoding="utf-8")
        config = EngineConfig(tmp_path)
        data = config.load()
        assert data["resources"]["max_documents"] == 3
        assert data["resources"]["max_total_chars"] == 8000

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "hax-ai.yaml").write_text("ai: [unclosed\n", encoding="utf-8")
        with pytest.raises(CLIError, match="Could not parse"):
            EngineConfig(tmp_path).load()

    def test_non_mapping_yaml(self, tmp_path):
        (tmp_path / "hax-ai.yaml").write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(CLIError, match="must contain a mapping"):
            EngineConfig(tmp_path).load()

    def test_get_missing_key(self, tmp_path):
        config = EngineConfig(tmp_path)
        config.load()
        assert config.get("ai.nothing", "fallback") == "fallback"
        assert config.get("ai.provider.deeper") is None

    def test_set_persists_and_coerces(self, tmp_path):
        config = EngineConfig(tmp_path)
        config.load()
        config.set("engine.history_limit", "8")
        config.set("ai.temperature", "0.2")

        reloaded = EngineConfig(tmp_path)
        reloaded.load()
        assert reloaded.get("engine.history_limit") == 8
        assert reloaded.get("ai.temperature") == 0.2

    def test_set_secret(self, tmp_path):
        config = EngineConfig(tmp_path)
        config.load()
        config.set("ai.api_key", "sk-1")
        assert "sk-1" not in config.config_path.read_text(encoding="utf-8")
        assert "sk-1" in config.secrets_path.read_text(encoding="utf-8")

    def test_to_dict_is_a_copy(self, tmp_path):
        config = EngineConfig(tmp_path)
        config.load()
        config.to_dict()["ai"]["provider"] = "changed"
        assert config.get("ai.provider") == ""


class TestValidation:

    def test_unknown_provider(self, tmp_path):
        config = EngineConfig(tmp_path)
        with pytest.raises(CLIError, match="Unknown AI provider"):
            config.set("ai.provider", "azure-openai")

    def test_empty_provider_allowed(self, tmp_path):
        config = EngineConfig(tmp_path)
        config.set("ai.provider", "")
        assert config.get("ai.provider") == ""

    @pytest.mark.parametrize("value", ["0", "-3", "many"])
    def test_positive_int_keys(self, tmp_path, value):
        with pytest.raises(CLIError, match="must be a positive integer"):
            EngineConfig(tmp_path).set("resources.max_documents", value)

    def test_bool_is_not_an_int(self, tmp_path):
        with pytest.raises(CLIError, match="must be a positive integer"):
            EngineConfig(tmp_path).set("engine.history_limit", True)

    def test_temperature_must_be_number(self, tmp_path):
        with pytest.raises(CLIError, match="must be a number"):
            EngineConfig(tmp_path).set("ai.temperature", "hot")

    def test_domain_suffix(self, tmp_path):
        config = EngineConfig(tmp_path)
        with pytest.raises(CLIError, match="Invalid deployment domain"):
            config.set("deploy.domain", "example.com")
        config.set("deploy.domain", "my-course.surge.sh")
        assert config.get("deploy.domain") == "my-course.surge.sh"

    def test_create_default_validates(self, tmp_path):
        with pytest.raises(CLIError, match="Unknown AI provider"):
            EngineConfig(tmp_path).create_default({"ai": {"provider": "bedrock"}})


class TestStorageRoot:

    def test_default_under_config_dir(self, tmp_path):
        config = EngineConfig(tmp_path)
        config.load()
        assert config.storage_root() == tmp_path / "sites"

    def test_config_value(self, tmp_path):
        config = EngineConfig(tmp_path)
        config.set("sites.storage_root", str(tmp_path / "mine"))
        assert config.storage_root() == tmp_path / "mine"

    def test_env_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SITES_DIR", str(tmp_path / "env"))
        config = EngineConfig(tmp_path)
        config.set("sites.storage_root", str(tmp_path / "mine"))
        assert config.storage_root() == tmp_path / "env"
