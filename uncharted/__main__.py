"""Command-line entry point for Uncharted Ruins."""

from __future__ import annotations

import argparse
import logging

from .app import SurveyApp
from .config import DisplayConfig, EconomyConfig, GameConfig, InputConfig
from .models import GUEST, CompletionReport, Identity

logger = logging.getLogger("uncharted")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Uncharted Ruins survey game.")
    parser.add_argument(
        "--width",
        type=int,
        help="Override the display width.",
    )
    parser.add_argument(
        "--height",
        type=int,
        help="Override the display height.",
    )
    parser.add_argument(
        "--fps",
        type=int,
        help="Override the target frame rate.",
    )
    parser.add_argument(
        "--fullscreen",
        dest="fullscreen",
        action="store_true",
        help="Start the game in full-screen mode.",
    )
    parser.add_argument(
        "--windowed",
        dest="fullscreen",
        action="store_false",
        help="Force the game to start in windowed mode.",
    )
    parser.add_argument(
        "--pixel-ratio",
        type=float,
        help="Scale factor between grid layout units and screen pixels.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed the site generator for a reproducible map.",
    )
    parser.add_argument(
        "--funds",
        type=int,
        help="Override the starting budget.",
    )
    parser.add_argument(
        "--no-touch",
        dest="touch",
        action="store_false",
        help="Ignore touch-screen input.",
    )
    parser.add_argument(
        "--user-id",
        help="Identifier of the signed-in surveyor (defaults to guest).",
    )
    parser.add_argument(
        "--gamertag",
        help="Display name of the signed-in surveyor.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    parser.set_defaults(fullscreen=None, touch=True)
    return parser


def parse_config(namespace: argparse.Namespace) -> GameConfig:
    config = GameConfig()
    display = config.display
    width = namespace.width or display.width
    height = namespace.height or display.height
    fps = namespace.fps or display.frame_rate
    pixel_ratio = namespace.pixel_ratio or display.pixel_ratio
    fullscreen = (
        display.fullscreen
        if namespace.fullscreen is None
        else namespace.fullscreen
    )
    funds = (
        config.economy.initial_funds
        if namespace.funds is None
        else namespace.funds
    )

    return GameConfig(
        display=DisplayConfig(
            width=width,
            height=height,
            caption=display.caption,
            frame_rate=fps,
            fullscreen=fullscreen,
            pixel_ratio=pixel_ratio,
        ),
        assets=config.assets,
        grid=config.grid,
        economy=EconomyConfig(
            initial_funds=funds,
            discovery_reward=config.economy.discovery_reward,
        ),
        input=InputConfig(
            long_press_ms=config.input.long_press_ms,
            touch_enabled=namespace.touch,
        ),
        timing=config.timing,
        seed=namespace.seed,
    )


def parse_identity(namespace: argparse.Namespace) -> Identity:
    if not namespace.user_id:
        return GUEST
    return Identity(user_id=namespace.user_id, gamertag=namespace.gamertag or namespace.user_id)


def report_completion(report: CompletionReport) -> None:
    logger.info(
        "Final funds $%d, %d structure(s) found in %d action(s)",
        report.final_funds,
        report.structures_found,
        report.actions_used,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = parse_config(args)
    app = SurveyApp(config, identity=parse_identity(args), on_complete=report_completion)
    app.run()
    return 0


if __name__ == "__main__":  # pragma: no cover - module use only
    raise SystemExit(main())
