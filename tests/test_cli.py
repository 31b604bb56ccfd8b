"""Tests for mcq_scraper.cli module."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest
from conftest import make_record

from mcq_scraper.cli import build_parser, main
from mcq_scraper.config import Settings
from mcq_scraper.driver import InvalidLocatorError
from mcq_scraper.models import RunOutcome, RunStatus
from mcq_scraper.store import ResultStore


class TestBuildParser:
    def test_url_is_optional(self):
        args = build_parser().parse_args([])
        assert args.url is None

    def test_parses_url(self):
        args = build_parser().parse_args(["https://example.com"])
        assert args.url == "https://example.com"

    def test_extractor_flag(self):
        args = build_parser().parse_args(["https://example.com", "-e", "openai"])
        assert args.extractor == "openai"

    def test_unknown_extractor_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["https://example.com", "-e", "nope"])

    def test_numeric_flags(self):
        args = build_parser().parse_args(
            ["https://example.com", "--delay", "0.5", "--timeout", "7"]
        )
        assert args.delay == 0.5
        assert args.timeout == 7.0

    def test_default_values(self):
        args = build_parser().parse_args(["https://example.com"])
        assert args.extractor is None
        assert args.html_file is None
        assert args.delay is None
        assert args.timeout is None
        assert args.restore is False
        assert args.clear is False
        assert args.output is None
        assert args.verbose is False


class TestMain:
    @pytest.fixture()
    def cli_settings(self, tmp_path) -> Settings:
        return Settings(results_path=str(tmp_path / "results.json"), page_delay=0)

    @pytest.fixture()
    def driver(self):
        mock = MagicMock()
        mock.start.return_value = RunOutcome(
            status=RunStatus.COMPLETED,
            records=[make_record("Q1")],
            pages=1,
        )
        return mock

    @pytest.fixture()
    def patched(self, cli_settings, driver):
        with patch("mcq_scraper.cli.Settings.from_env", return_value=cli_settings), \
             patch("mcq_scraper.cli.get_extractor", return_value=MagicMock()) as get_extractor, \
             patch("mcq_scraper.cli.PaginationDriver", return_value=driver) as driver_cls:
            yield {"get_extractor": get_extractor, "driver_cls": driver_cls}

    def test_outputs_json_to_stdout(self, patched, driver, capsys):
        assert main(["https://example.com/mcq"]) == 0

        parsed = json.loads(capsys.readouterr().out)
        assert parsed[0]["question"] == "Q1"
        assert parsed[0]["correctAnswer"] == "A"
        driver.start.assert_called_once_with("https://example.com/mcq")

    def test_writes_to_file(self, patched, tmp_path):
        outfile = tmp_path / "out.json"
        assert main(["https://example.com", "-o", str(outfile)]) == 0
        assert json.loads(outfile.read_text(encoding="utf-8"))[0]["question"] == "Q1"

    def test_uses_default_extractor(self, patched, cli_settings):
        main(["https://example.com"])
        patched["get_extractor"].assert_called_once_with("gemini", cli_settings)

    def test_overrides_apply_to_settings(self, patched):
        main(["https://example.com", "--delay", "0.25", "--timeout", "3"])
        settings = patched["driver_cls"].call_args.kwargs["settings"]
        assert settings.page_delay == 0.25
        assert settings.fetch_timeout == 3

    def test_blocked_prints_handoff(self, patched, driver, capsys):
        driver.start.return_value = RunOutcome(
            status=RunStatus.BLOCKED,
            message="The target website appears to be blocking automated requests.",
            blocked_locator="https://example.com/mcq",
        )

        assert main(["https://example.com/mcq"]) == 2

        captured = capsys.readouterr()
        assert "--html-file page.html" in captured.err
        assert "https://example.com/mcq" in captured.err
        assert captured.out == ""

    def test_failed_keeps_partial_records(self, patched, driver, capsys):
        driver.start.return_value = RunOutcome(
            status=RunStatus.FAILED,
            records=[make_record("Q1")],
            message="Received malformed data from the API.",
            failure_kind="malformed",
        )

        assert main(["https://example.com"]) == 1

        captured = capsys.readouterr()
        assert "malformed failure" in captured.err
        assert json.loads(captured.out)[0]["question"] == "Q1"

    def test_html_file_runs_single_page(self, patched, driver, tmp_path):
        page = tmp_path / "page.html"
        page.write_text("<html>saved</html>", encoding="utf-8")
        driver.start_single_page.return_value = RunOutcome(status=RunStatus.COMPLETED)

        assert main(["https://example.com/mcq", "--html-file", str(page)]) == 0

        driver.start_single_page.assert_called_once_with(
            "<html>saved</html>", "https://example.com/mcq"
        )
        driver.start.assert_not_called()

    def test_invalid_url_is_usage_error(self, patched, driver):
        driver.start.side_effect = InvalidLocatorError("Please enter a valid starting URL")
        with pytest.raises(SystemExit) as exc_info:
            main(["not-a-url"])
        assert exc_info.value.code == 2

    def test_requires_url_or_html(self, patched):
        with pytest.raises(SystemExit):
            main([])

    def test_keyboard_interrupt_returns_partial(self, patched, driver, capsys):
        driver.start.side_effect = KeyboardInterrupt
        driver.session.records = [make_record("Q1")]
        driver.session.page_count = 1

        assert main(["https://example.com"]) == 130

        driver.cancel.assert_called_once()
        assert json.loads(capsys.readouterr().out)[0]["question"] == "Q1"

    def test_missing_api_key(self, patched, capsys):
        patched["get_extractor"].side_effect = ValueError("GEMINI_API_KEY is required")
        assert main(["https://example.com"]) == 1
        assert "GEMINI_API_KEY" in capsys.readouterr().err

    def test_restore_prints_saved(self, patched, cli_settings, capsys):
        ResultStore(cli_settings.results_path).save([make_record("Saved")])

        assert main(["--restore"]) == 0

        captured = capsys.readouterr()
        assert "Restored 1 records" in captured.err
        assert json.loads(captured.out)[0]["question"] == "Saved"

    def test_restore_with_nothing_saved(self, patched):
        assert main(["--restore"]) == 1

    def test_clear(self, patched, cli_settings):
        store = ResultStore(cli_settings.results_path)
        store.save([make_record("Saved")])

        assert main(["--clear"]) == 0
        assert store.load() is None

    def test_missing_html_file_is_usage_error(self, patched, driver, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--html-file", str(tmp_path / "missing.html")])
        assert exc_info.value.code == 2
        driver.start_single_page.assert_not_called()

    def test_restore_with_url_rejected(self, patched, driver, cli_settings):
        ResultStore(cli_settings.results_path).save([make_record("Saved")])

        with pytest.raises(SystemExit) as exc_info:
            main(["https://example.com", "--restore"])

        assert exc_info.value.code == 2
        driver.start.assert_not_called()
