# src/main.py — v2
"""CLI entry point: food and health commands.

Usage:
    nutriguard food <image>
    nutriguard health <image> --user <id> [--profiles DIR]

Prints the response envelope as JSON on stdout. Exit code 0 on success,
1 on any failed analysis.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import shutil
import sys
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from nutriguard.version import __version__

if TYPE_CHECKING:
    from nutriguard.config.settings import Settings
    from nutriguard.core.models import UploadedFile

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from nutriguard.config.settings import Settings

    settings = Settings()
    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="nutriguard",
        description=f"NutriGuard v{__version__}: food-label analysis with health checks",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- food ---
    p_food = subparsers.add_parser(
        "food", help="Extract food data from a label photo",
    )
    p_food.add_argument("image", type=Path, help="Path to label photo")
    p_food.set_defaults(func=_cmd_food)

    # --- health ---
    p_health = subparsers.add_parser(
        "health", help="Analyze a label photo against a user's health profile",
    )
    p_health.add_argument("image", type=Path, help="Path to label photo")
    p_health.add_argument("--user", required=True, help="User id")
    p_health.add_argument(
        "--profiles", type=Path, default=None,
        help="Profile directory (default: PROFILE_ROOT setting)",
    )
    p_health.set_defaults(func=_cmd_health)

    return parser


async def _cmd_food(args: argparse.Namespace, settings: Settings) -> int:
    """Run food extraction on one image."""
    from nutriguard.api.facade import NutriGuard

    guard = NutriGuard.from_settings(settings)
    upload = _stage_upload(args.image)
    response = await guard.analyze_food(upload)
    print(response.to_json())
    return 0 if response.success else 1


async def _cmd_health(args: argparse.Namespace, settings: Settings) -> int:
    """Run food extraction plus health analysis for one user."""
    from nutriguard.api.facade import NutriGuard

    kwargs = {}
    if args.profiles is not None:
        from nutriguard.profile.json_profile_store import JsonProfileStore
        kwargs["profile_store"] = JsonProfileStore(args.profiles)

    guard = NutriGuard.from_settings(settings, **kwargs)
    upload = _stage_upload(args.image)
    response = await guard.analyze_health(upload, user_id=args.user)
    print(response.to_json())
    return 0 if response.success else 1


def _stage_upload(image: Path) -> UploadedFile | None:
    """Copy the image to a temporary file, since analysis deletes its input."""
    from nutriguard.core.models import UploadedFile

    if not image.is_file():
        return None

    fd, tmp_name = tempfile.mkstemp(prefix="nutriguard-", suffix=image.suffix.lower())
    with open(fd, "wb") as dst, image.open("rb") as src:
        shutil.copyfileobj(src, dst)
    return UploadedFile(
        path=Path(tmp_name),
        original_name=image.name,
        size=image.stat().st_size,
    )


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from nutriguard.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
