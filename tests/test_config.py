"""Tests for config loading."""

import pytest

from talent_orchestrator.config import AppConfig, HistoryConfig, LLMConfig, load_config


class TestConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.llm.fast_model == "claude-haiku-4-5-20251001"
        assert config.limits.max_jobs == 20
        assert config.limits.max_tailored_jobs == 5
        assert config.limits.token_budget_total == 60_000
        assert config.limits.token_budget_max == 120_000
        assert config.pipeline.stand_in is False

    def test_load_config_defaults(self, tmp_path, monkeypatch):
        """Loading from non-existent path returns defaults."""
        monkeypatch.delenv("AI_QUALITY_MODEL", raising=False)
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.llm.quality_model == "claude-sonnet-4-5-20250929"

    def test_load_config_from_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv("AI_FAST_MODEL", raising=False)
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "llm:\n  fast_model: test-model\nlimits:\n  max_tailored_jobs: 3\n"
        )
        config = load_config(yaml_path)
        assert config.llm.fast_model == "test-model"
        assert config.limits.max_tailored_jobs == 3
        # Defaults for unspecified
        assert config.guardrails.max_cover_letter_body == 3_000

    def test_empty_sections(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("llm:\nlimits:\n")
        config = load_config(yaml_path)
        assert config.limits.max_jobs == 20

    def test_env_overrides_models(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AI_FAST_MODEL", "fast-override")
        monkeypatch.setenv("AI_QUALITY_MODEL", "quality-override")
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("llm:\n  fast_model: from-yaml\n")
        config = load_config(yaml_path)
        assert config.llm.fast_model == "fast-override"
        assert config.llm.quality_model == "quality-override"

    def test_mock_ai_env_enables_stand_in(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MOCK_AI", "1")
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.pipeline.stand_in is True

    def test_history_resolved_path(self):
        history = HistoryConfig(db_path="~/test.db")
        resolved = history.resolved_db_path
        assert "~" not in str(resolved)

    def test_frozen_config(self):
        config = LLMConfig()
        with pytest.raises(AttributeError):
            config.fast_model = "changed"
