from __future__ import annotations

import io
import json

import pytest
from conftest import WordTokenizer

from buzzword import __version__
from buzzword.cli import build_parser, ingest_lines, main, run_test_mode
from buzzword.core.config import Config
from buzzword.ingest import IngestionService
from buzzword.storage.frequency import FrequencyStore


def event_line(content: str, created_at: int = 1_700_000_000) -> str:
    return json.dumps({"id": "e" * 64, "pubkey": "a" * 64, "created_at": created_at, "kind": 1, "content": content})


@pytest.fixture
def ingestion() -> IngestionService:
    return IngestionService(FrequencyStore(), WordTokenizer())


class TestParser:
    def test_flags(self):
        args = build_parser().parse_args(["-t", "--ignores", "i.txt", "--userdic", "u.dic"])
        assert args.test
        assert args.ignores == "i.txt"
        assert args.userdic == "u.dic"

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert not args.test and not args.version
        assert args.ignores is None and args.userdic is None


class TestIngestLines:
    def test_skips_blank_and_malformed_lines(self, ingestion):
        lines = [event_line("猫"), "", "not json", '{"kind": "x"}', event_line("犬")]
        assert ingest_lines(ingestion, lines) == 2
        assert len(ingestion.store) == 2

    def test_tokenizer_failure_skips_line(self, ingestion):
        class Broken:
            def tokenize(self, text):
                raise RuntimeError("boom")

        ingestion.tokenizer = Broken()
        assert ingest_lines(ingestion, [event_line("猫")]) == 0


class TestRunTestMode:
    def test_prints_full_ranking(self, ingestion):
        lines = [event_line("猫|犬")] * 3 + [event_line(f"語{i}") for i in range(8)]
        stdout = io.StringIO()

        code = run_test_mode(ingestion, io.StringIO("\n".join(lines)), stdout, Config())

        output = stdout.getvalue().splitlines()
        assert code == 0
        assert output[:2] == ["1位: 犬 (3)", "2位: 猫 (3)"]
        assert output[2] == "3位: 語0 (1)"
        assert len(output) == 10

    def test_insufficient_data(self, ingestion):
        stdout = io.StringIO()
        code = run_test_mode(ingestion, io.StringIO(event_line("猫")), stdout, Config())
        assert code == 1
        assert stdout.getvalue() == ""


class TestMain:
    def test_version(self, capsys):
        assert main(["--version"]) == 0
        assert capsys.readouterr().out.strip() == __version__
