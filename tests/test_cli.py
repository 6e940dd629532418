"""Tests for CLI parsing and bootstrap."""

from __future__ import annotations

import logging
import os
from unittest.mock import MagicMock

import pytest

from movie_house.cli import (
    _apply_overrides,
    _build_parser,
    _configure_color_mode,
    get_log_path,
    main,
)
from movie_house.models import OMDB_DEMO_API_KEY, SearchFilters, UserConfig


def _run(argv, *, config=None, tty=True, save_ok=True):
    app = MagicMock()
    factory = MagicMock(return_value=app)
    save = MagicMock(return_value=save_ok)
    code = main(
        argv,
        load_config_fn=lambda: config or UserConfig(),
        save_config_fn=save,
        configure_logging_fn=lambda debug: None,
        configure_color_mode_fn=lambda mode: None,
        validate_interactive_tty_fn=lambda: tty,
        app_factory=factory,
    )
    return code, factory, app, save


@pytest.fixture(autouse=True)
def _no_env_key(monkeypatch):
    monkeypatch.delenv("OMDB_API_KEY", raising=False)


def test_defaults_start_discovery() -> None:
    code, factory, app, save = _run([])

    assert code == 0
    app.run.assert_called_once_with()
    save.assert_not_called()
    _, kwargs = factory.call_args
    assert kwargs["initial_query"] == ""
    assert kwargs["initial_filters"] == SearchFilters()
    assert kwargs["api_key"] == OMDB_DEMO_API_KEY
    assert kwargs["ascii_icons"] is False


def test_initial_query_and_filters_forwarded() -> None:
    _, factory, _, _ = _run(["--query", "batman", "--type", "series", "--year", "2020"])

    _, kwargs = factory.call_args
    assert kwargs["initial_query"] == "batman"
    assert kwargs["initial_filters"] == SearchFilters(media_type="series", year="2020")


def test_invalid_type_rejected_by_parser() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["--type", "game"])


def test_api_key_flag_wins_over_config() -> None:
    _, factory, _, _ = _run(["--api-key", "cli-key"], config=UserConfig(api_key="cfg"))
    assert factory.call_args.kwargs["api_key"] == "cli-key"


def test_non_tty_exits_with_code_2(capsys) -> None:
    code, factory, _, _ = _run([], tty=False)

    assert code == 2
    factory.assert_not_called()
    assert "interactive TTY" in capsys.readouterr().err


def test_save_config_persists_overrides() -> None:
    code, _, _, save = _run(["--api-key", "k", "--timeout", "25", "--save-config"])

    assert code == 0
    saved = save.call_args.args[0]
    assert saved.api_key == "k"
    assert saved.request_timeout_seconds == 25


def test_save_config_failure_returns_1(capsys) -> None:
    code, factory, _, _ = _run(["--save-config"], save_ok=False)

    assert code == 1
    factory.assert_not_called()
    assert "Could not save the configuration." in capsys.readouterr().err


@pytest.mark.parametrize(("raw", "expected"), [("0", 1), ("15", 15), ("999", 60)])
def test_timeout_override_clamped(raw: str, expected: int) -> None:
    args = _build_parser().parse_args(["--timeout", raw])
    assert _apply_overrides(args, UserConfig()).request_timeout_seconds == expected


def test_ascii_flag_sets_config() -> None:
    args = _build_parser().parse_args(["--ascii"])
    assert _apply_overrides(args, UserConfig()).ascii_icons is True


def test_no_color_overrides_color_choice() -> None:
    modes: list[str] = []
    main(
        ["--color", "always", "--no-color"],
        load_config_fn=UserConfig,
        configure_logging_fn=lambda debug: None,
        configure_color_mode_fn=modes.append,
        validate_interactive_tty_fn=lambda: False,
    )
    assert modes == ["never"]


def test_debug_flag_forwarded_to_logging() -> None:
    seen: list[bool] = []
    main(
        ["--debug"],
        load_config_fn=UserConfig,
        configure_logging_fn=seen.append,
        configure_color_mode_fn=lambda mode: None,
        validate_interactive_tty_fn=lambda: False,
    )
    assert seen == [True]


class TestConfigureColorMode:
    def test_never_sets_no_color(self, monkeypatch) -> None:
        monkeypatch.setenv("FORCE_COLOR", "1")
        monkeypatch.setenv("NO_COLOR", "")
        _configure_color_mode("never")

        assert os.environ["NO_COLOR"] == "1"
        assert "FORCE_COLOR" not in os.environ

    def test_always_sets_force_color(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setenv("FORCE_COLOR", "")
        _configure_color_mode("always")

        assert os.environ["FORCE_COLOR"] == "1"
        assert "NO_COLOR" not in os.environ

    def test_auto_drops_force_color_and_keeps_user_no_color(self, monkeypatch) -> None:
        monkeypatch.setenv("FORCE_COLOR", "1")
        monkeypatch.setenv("NO_COLOR", "1")
        _configure_color_mode("auto")

        assert "FORCE_COLOR" not in os.environ
        assert os.environ["NO_COLOR"] == "1"


def test_configure_logging_without_debug_disables(monkeypatch) -> None:
    from movie_house.cli import _configure_logging

    disabled: list[int] = []
    monkeypatch.setattr(logging, "disable", disabled.append)
    _configure_logging(False)
    assert disabled == [logging.CRITICAL]


def test_log_path_lives_in_config_dir(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr("movie_house.cli.user_config_dir", lambda name: str(tmp_path / name))
    assert get_log_path() == tmp_path / "movie-house" / "movie-house.log"
