"""
studypass.__main__ — Entry point for ``python -m studypass``
=============================================================

Commands::

    python -m studypass tiers             # print the tier table
    python -m studypass progress 4500     # tier / level progress for a balance
    python -m studypass serve             # run the API (uvicorn)
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from studypass.constants import tier_style
from studypass.engine.progress import get_pass_points_progress
from studypass.engine.tiers import DEFAULT_TIERS

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("studypass")


def _print_tiers() -> None:
    for tier in DEFAULT_TIERS:
        style = tier_style(tier.name)
        upper = "∞" if tier.unbounded else str(tier.max_points)
        print(f"{style.icon} {tier.name:<10} [{tier.min_points}, {upper})")
        for benefit in style.benefits:
            print(f"    • {benefit}")


def _print_progress(points: int) -> None:
    p = get_pass_points_progress(points)
    print(f"Pass Points : {p.current_pass_points}")
    print(f"Level       : {p.current_level} ({p.progress_percentage:.0f}% → next in {p.points_needed})")
    print(f"Tier        : {tier_style(p.tier.name).icon} {p.tier.name}")
    if p.next_tier is None:
        print("Next tier   : — (top tier)")
    else:
        print(f"Next tier   : {p.next_tier.name} in {p.points_to_next_tier} points")


def _serve(port: int | None) -> None:
    import uvicorn

    from studypass.api.deps import get_config

    cfg = get_config()
    uvicorn.run("studypass.api.main:app", host="0.0.0.0", port=port or cfg.api_port)


def main(argv: list[str] | None = None) -> int:
    """Parse *argv* and run the chosen command."""
    load_dotenv()

    parser = argparse.ArgumentParser(prog="studypass")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("tiers", help="Print the tier table")
    progress = sub.add_parser("progress", help="Show progress for a balance")
    progress.add_argument("points", type=int)
    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--port", type=int, default=None)

    args = parser.parse_args(argv)
    if args.command == "tiers":
        _print_tiers()
    elif args.command == "progress":
        _print_progress(args.points)
    elif args.command == "serve":
        logger.info("Starting StudyPass API")
        _serve(args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
