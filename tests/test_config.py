"""Tests for environment configuration validation."""

from dialplan import config


class TestValidateConfig:
    def test_defaults_are_valid(self, monkeypatch):
        monkeypatch.setattr(config, "RULES_FILE", "")
        assert config.validate_config() == []

    def test_missing_rules_file(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config, "RULES_FILE", str(tmp_path / "missing.json"))
        issues = config.validate_config()
        assert any("rules file not found" in issue for issue in issues)

    def test_existing_rules_file(self, monkeypatch, rules_file):
        monkeypatch.setattr(config, "RULES_FILE", str(rules_file))
        assert config.validate_config() == []

    def test_invalid_values(self, monkeypatch):
        monkeypatch.setattr(config, "RULES_FILE", "")
        monkeypatch.setattr(config, "MAX_PATTERN_LENGTH", 0)
        monkeypatch.setattr(config, "DEFAULT_COUNTRY_CODE", "+1")
        monkeypatch.setattr(config, "LOG_LEVEL", "chatty")
        issues = config.validate_config()
        assert len(issues) == 3

    def test_toll_free_codes(self):
        assert "800" in config.TOLL_FREE_AREA_CODES
        assert "202" not in config.TOLL_FREE_AREA_CODES
