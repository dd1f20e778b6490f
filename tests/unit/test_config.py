from __future__ import annotations

import pytest

from buzzword.core.config import (
    DEFAULT_PUBLISH_RELAYS,
    Config,
    IgnoreSet,
    get_bool_env,
    get_list_env,
    load_ignores,
)
from buzzword.core.config import base as config_base
from buzzword.core.exceptions import ConfigLoadError
from buzzword.nostr.keys import encode_npub

HEX_KEY = "ab" * 32


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in [
        "BOT_NSEC",
        "BUZZWORD_RELAYS",
        "BUZZWORD_SUBSCRIBE_RELAYS",
        "HEARTBEAT_URL",
        "FONTFILE",
        "IGNORES",
        "USERDIC",
        "BUZZWORD_LOG_LEVEL",
        "BUZZWORD_SCRIPT_GATE",
        "BUZZWORD_UPLOAD_URL",
    ]:
        # setenv first so teardown also undoes values loaded from .env files
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setattr(config_base, "_env_loaded", False)


# ── Environment ──────────────────────────────────────────────────


class TestConfigLoad:
    def test_defaults(self, tmp_path):
        config = Config.load(env_file=str(tmp_path / "missing.env"))

        assert config.nsec == ""
        assert config.publish_relays == DEFAULT_PUBLISH_RELAYS
        assert config.timing.summary_interval == 3600
        assert config.timing.sweep_interval == 600
        assert config.ranking.capacity == 1000
        assert config.script_gate is True

    def test_environment_values(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BOT_NSEC", "nsec1xyz")
        monkeypatch.setenv("BUZZWORD_RELAYS", "wss://a.example, wss://b.example,,")
        monkeypatch.setenv("HEARTBEAT_URL", "https://uptime.example/push")
        monkeypatch.setenv("BUZZWORD_SCRIPT_GATE", "off")

        config = Config.load(env_file=str(tmp_path / "missing.env"))

        assert config.nsec == "nsec1xyz"
        assert config.publish_relays == ["wss://a.example", "wss://b.example"]
        assert config.heartbeat_url == "https://uptime.example/push"
        assert config.script_gate is False

    def test_env_file_does_not_override_environment(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("FONTFILE=from-file.ttf\nUSERDIC=from-file.dic\n", encoding="utf-8")
        monkeypatch.setenv("FONTFILE", "from-env.ttf")

        config = Config.load(env_file=str(env_file))

        assert config.font_file == "from-env.ttf"
        assert config.userdic_path == "from-file.dic"

    def test_none_overrides_ignored(self, monkeypatch, tmp_path):
        monkeypatch.setenv("IGNORES", "env-ignores.txt")

        config = Config.load(
            env_file=str(tmp_path / "missing.env"), ignores_path=None, userdic_path="cli.dic"
        )

        assert config.ignores_path == "env-ignores.txt"
        assert config.userdic_path == "cli.dic"


class TestEnvHelpers:
    @pytest.mark.parametrize("value, expected", [("1", True), ("yes", True), ("False", False), ("", True)])
    def test_bool_env(self, monkeypatch, value, expected):
        monkeypatch.setenv("BUZZWORD_SCRIPT_GATE", value)
        assert get_bool_env("BUZZWORD_SCRIPT_GATE", True) is expected

    def test_bool_env_garbage_falls_back(self, monkeypatch):
        monkeypatch.setenv("BUZZWORD_SCRIPT_GATE", "maybe")
        assert get_bool_env("BUZZWORD_SCRIPT_GATE", False) is False

    def test_list_env_default_is_copied(self):
        default = ["wss://x"]
        result = get_list_env("BUZZWORD_RELAYS", default)
        result.append("wss://y")
        assert default == ["wss://x"]


# ── Ignore list ──────────────────────────────────────────────────


class TestIgnoreSet:
    def test_parses_hex_and_npub(self):
        other = "cd" * 32
        ignores = IgnoreSet.from_lines(
            [
                "# bots",
                "",
                f"{HEX_KEY} some bot",
                f"{encode_npub(other)}   another one",
            ]
        )

        assert len(ignores) == 2
        assert HEX_KEY in ignores
        assert other in ignores

    def test_garbage_lines_skipped(self):
        ignores = IgnoreSet.from_lines(["not-a-key", "npub1invalid", "abcd"])
        assert len(ignores) == 0

    def test_membership_is_case_insensitive(self):
        assert HEX_KEY.upper() in IgnoreSet([HEX_KEY])

    def test_non_string_not_contained(self):
        assert None not in IgnoreSet([HEX_KEY])

    def test_load_file(self, tmp_path):
        path = tmp_path / "ignores.txt"
        path.write_text(f"{HEX_KEY}\n", encoding="utf-8")
        assert HEX_KEY in IgnoreSet.load(path)

    def test_load_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigLoadError):
            IgnoreSet.load(tmp_path / "nope.txt")

    def test_load_ignores_falls_back_to_empty(self, tmp_path):
        assert len(load_ignores(tmp_path / "nope.txt")) == 0
