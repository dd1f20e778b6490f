from __future__ import annotations

import io
import json
import logging

import pytest
from conftest import WordTokenizer

from buzzword import cli
from buzzword.core.config import Config
from buzzword.core.exceptions import ConfigurationError
from buzzword.core.logging import setup_logging
from buzzword.service import server
from buzzword.storage.frequency import FrequencyStore

HEX_KEY = "ab" * 32


@pytest.fixture
def no_sudachi(monkeypatch):
    monkeypatch.setattr(server, "SudachiTokenizer", lambda user_dict: WordTokenizer())


class TestBuilders:
    def test_invalid_key_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="BOT_NSEC") as exc_info:
            server.build_signer(Config(nsec=""))
        assert exc_info.value.code == "CONFIGURATION_ERROR"

    def test_signer_from_hex(self):
        assert len(server.build_signer(Config(nsec="11" * 32)).public_key) == 64

    def test_ingestion_wiring(self, tmp_path, no_sudachi):
        ignores = tmp_path / "ignores.txt"
        ignores.write_text(f"{HEX_KEY}\n", encoding="utf-8")
        config = Config(ignores_path=str(ignores), script_gate=False)

        ingestion = server.build_ingestion(config, FrequencyStore())

        assert isinstance(ingestion.tokenizer, WordTokenizer)
        assert HEX_KEY in ingestion.ignores
        assert ingestion.script_gate is False


class TestMain:
    def test_service_refuses_to_start_without_key(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("BOT_NSEC", raising=False)
        assert cli.main([]) == 1

    def test_test_mode_does_not_need_key(self, monkeypatch, tmp_path, capsys, no_sudachi):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("BOT_NSEC", raising=False)
        lines = [
            json.dumps({"id": str(i), "pubkey": "a" * 64, "created_at": 1, "content": f"語{i}"})
            for i in range(10)
        ]
        monkeypatch.setattr("sys.stdin", io.StringIO("\n".join(lines)))

        assert cli.main(["-t", "--ignores", str(tmp_path / "none.txt")]) == 0
        assert capsys.readouterr().out.splitlines()[0] == "1位: 語0 (1)"


def test_setup_logging_quiets_client_libraries():
    setup_logging("DEBUG")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("websockets").level == logging.WARNING
    setup_logging("INFO")
    assert logging.getLogger().level == logging.INFO
