"""Tests for command-line parsing."""

from uncharted.__main__ import build_parser, parse_config, parse_identity
from uncharted.config import GameConfig
from uncharted.models import GUEST


def test_defaults_match_game_config():
    args = build_parser().parse_args([])
    config = parse_config(args)

    assert config == GameConfig()
    assert parse_identity(args) is GUEST


def test_overrides_are_applied():
    args = build_parser().parse_args(
        [
            "--width",
            "800",
            "--fps",
            "30",
            "--fullscreen",
            "--seed",
            "9",
            "--funds",
            "0",
            "--no-touch",
            "--pixel-ratio",
            "2",
        ]
    )
    config = parse_config(args)

    assert config.display.width == 800
    assert config.display.height == GameConfig().display.height
    assert config.display.frame_rate == 30
    assert config.display.fullscreen is True
    assert config.display.pixel_ratio == 2.0
    assert config.seed == 9
    assert config.economy.initial_funds == 0
    assert config.input.touch_enabled is False


def test_identity_from_flags():
    args = build_parser().parse_args(["--user-id", "abc", "--gamertag", "Indy"])
    identity = parse_identity(args)

    assert identity.user_id == "abc"
    assert identity.gamertag == "Indy"
    assert not identity.is_guest
