"""Tests for the trendscope CLI (argument parsing, output formatting)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from trendscope.domain.entities import ConfigError, VideoResult
from trendscope.interfaces.cli import cli


class TestFormatCount:
    @pytest.mark.parametrize(
        ("n", "expected"),
        [
            (0, "0"),
            (999, "999"),
            (9_999, "9,999"),
            (10_000, "1.0w"),
            (35_000, "3.5w"),
            (123_456, "12.3w"),
            (210_000_000, "21000.0w"),
        ],
    )
    def test_format(self, n: int, expected: str) -> None:
        assert cli.format_count(n) == expected


class TestRenderTable:
    def test_rows_in_given_order(self, video_result: VideoResult) -> None:
        table = cli.render_table([video_result, video_result])
        lines = table.splitlines()
        assert len(lines) == 3
        assert lines[1].lstrip().startswith("1")
        assert "B站" in lines[1]
        assert "3.5w" in lines[1]
        assert video_result.title in lines[2]


class TestParseArgs:
    def test_no_args_means_serve(self) -> None:
        args = cli._parse_args([])
        assert args.command == "serve"
        assert args.host is None

    def test_bare_flags_mean_serve(self) -> None:
        args = cli._parse_args(["--port", "9000", "--log-level", "DEBUG"])
        assert args.command == "serve"
        assert args.port == 9000
        assert args.log_level == "DEBUG"

    def test_videos(self) -> None:
        args = cli._parse_args(
            ["videos", "清代青花瓷", "--pages", "3", "--api-url", "http://x:8000"]
        )
        assert args.command == "videos"
        assert args.term == "清代青花瓷"
        assert args.pages == 3
        assert args.api_url == "http://x:8000"


class TestStart:
    def test_serve_runs_uvicorn(self) -> None:
        with (
            patch.object(cli, "load_config") as load_config,
            patch.object(cli, "configure_logging", return_value={"version": 1}),
            patch.object(cli, "create_app") as create_app,
            patch.object(cli.uvicorn, "run") as run,
        ):
            assert cli.start(["serve", "--port", "9001"]) == 0

        load_config.assert_called_once()
        create_app.assert_called_once_with(load_config.return_value)
        assert run.call_args.kwargs["port"] == 9001
        assert run.call_args.kwargs["log_config"] == {"version": 1}

    def test_videos_prints_table(
        self, video_result: VideoResult, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with (
            patch.object(cli, "load_config", return_value=MagicMock()),
            patch.object(cli, "configure_logging"),
            patch.object(cli.asyncio, "run", return_value=[video_result]) as run,
        ):
            assert cli.start(["videos", "青花瓷"]) == 0
            run.call_args.args[0].close()

        assert video_result.title in capsys.readouterr().out

    def test_videos_quiet_logging_by_default(self) -> None:
        with (
            patch.object(cli, "load_config", return_value=MagicMock()) as load_config,
            patch.object(cli, "configure_logging"),
            patch.object(cli.asyncio, "run", return_value=[]) as run,
        ):
            cli.start(["videos", "q"])
            run.call_args.args[0].close()

        overrides = load_config.call_args.kwargs["cli_overrides"]
        assert overrides["log_level"] == "WARNING"

    def test_videos_error_exit_code(self, capsys: pytest.CaptureFixture[str]) -> None:
        def _raise(coro):
            coro.close()
            raise ConfigError("no key")

        with (
            patch.object(cli, "load_config", return_value=MagicMock()),
            patch.object(cli, "configure_logging"),
            patch.object(cli.asyncio, "run", side_effect=_raise),
        ):
            assert cli.start(["videos", "q"]) == 1

        assert "no key" in capsys.readouterr().err
