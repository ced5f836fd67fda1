"""
Tests for library configuration.
"""

import pytest

from cloudkit.config import Config


class TestConfig:
    """Test suite for Config validation"""

    def test_defaults_are_valid(self, monkeypatch):
        monkeypatch.setattr(Config, "RFC822_CENTURY_PIVOT", 69)
        monkeypatch.setattr(Config, "LOG_LEVEL", "INFO")
        assert Config.validate_environment() is True

    @pytest.mark.parametrize("attribute,value", [
        ("RFC822_CENTURY_PIVOT", 150),
        ("RFC822_CENTURY_PIVOT", -1),
        ("LOG_LEVEL", "LOUD"),
    ])
    def test_invalid_overrides(self, monkeypatch, capsys, attribute, value):
        monkeypatch.setattr(Config, attribute, value)
        assert Config.validate_environment() is False
        assert attribute in capsys.readouterr().out

    def test_summary(self, capsys):
        Config.print_config_summary()
        out = capsys.readouterr().out
        assert "Default date format" in out
        assert "RFC 822 pivot year" in out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
