from twitch_simple_irc import constants
from twitch_simple_irc.constants import _get_env_float, _get_env_int


def test_get_env_int_valid(monkeypatch):
    monkeypatch.setenv("TEST_VAR", "123")
    assert _get_env_int("TEST_VAR", 999) == 123


def test_get_env_int_invalid_falls_back(monkeypatch, capsys):
    monkeypatch.setenv("TEST_VAR", "abc")
    assert _get_env_int("TEST_VAR", 999) == 999
    assert "Invalid integer value" in capsys.readouterr().out


def test_get_env_float(monkeypatch):
    monkeypatch.setenv("TEST_VAR", "0.5")
    assert _get_env_float("TEST_VAR", 2.0) == 0.5
    monkeypatch.setenv("TEST_VAR", "x")
    assert _get_env_float("TEST_VAR", 2.0) == 2.0


def test_unset_uses_default(monkeypatch):
    monkeypatch.delenv("TEST_VAR", raising=False)
    assert _get_env_float("TEST_VAR", 2.0) == 2.0


def test_protocol_defaults():
    assert constants.CAPABILITIES == "twitch.tv/tags twitch.tv/commands"
    assert constants.TCP_PORT_SECURE == 6697
    assert constants.TCP_PORT_PLAIN == 6667
    assert constants.MAX_RECONNECT_INTERVAL >= constants.RECONNECT_BASE_INTERVAL
