"""Command-line runner for the stats engine.

Each subcommand calls the matching API handler and prints its JSON
payload, e.g.:

    python -m src.pipeline.run leaderboard --team-id t1 --season 2024-25 --category goals
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from src.api.handlers import HANDLERS, build_statistics_engine

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _add_scope(parser: argparse.ArgumentParser, player: bool = True) -> None:
    if player:
        parser.add_argument("--player-id", dest="playerId", required=True)
    parser.add_argument("--team-id", dest="teamId", required=True)
    parser.add_argument("--season", required=True, help="Season label, e.g. 2024-25")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hockey team stats engine")
    parser.add_argument(
        "--backend",
        choices=["postgres", "supabase", "memory"],
        default=None,
        help="Event store backend (default: STATS_BACKEND env var, then postgres).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    p = commands.add_parser("player-stats", help="Complete stats for one player")
    _add_scope(p)
    p.add_argument("--advanced", action="store_true", help="Include advanced metrics")
    p.add_argument("--strength", choices=["all", "even", "powerplay", "penalty_kill"])
    p.add_argument("--home-away", dest="homeAway", choices=["home", "away"])
    p.add_argument("--start-date", dest="startDate", help="YYYY-MM-DD")
    p.add_argument("--end-date", dest="endDate", help="YYYY-MM-DD")
    p.add_argument("--recalculate", action="store_true", help="Bypass the cache")

    p = commands.add_parser("player-games", help="Game-by-game log for one player")
    _add_scope(p)

    p = commands.add_parser("team-stats", help="Team record and special teams")
    _add_scope(p, player=False)

    p = commands.add_parser("team-players", help="Roster stats, sorted")
    _add_scope(p, player=False)
    p.add_argument("--position", choices=["all", "F", "D", "G"])
    p.add_argument("--min-games", dest="minGames", type=int)
    p.add_argument("--sort-by", dest="sortBy")
    p.add_argument("--sort-order", dest="sortOrder", choices=["asc", "desc"])

    p = commands.add_parser("leaderboard", help="Top players in a category")
    _add_scope(p, player=False)
    p.add_argument("--category", default="points")
    p.add_argument("--position", default="all", choices=["all", "F", "D", "G"])
    p.add_argument("--limit", type=int, default=10)
    p.add_argument("--min-games", dest="minGames", type=int, default=5)

    p = commands.add_parser("compare", help="Compare up to six players")
    _add_scope(p, player=False)
    p.add_argument("--player-ids", dest="playerIds", required=True, help="Comma-separated ids")
    p.add_argument("--categories", help="Comma-separated categories")

    p = commands.add_parser("trends", help="Per-game trend of one stat")
    _add_scope(p)
    p.add_argument("--stat", default="points")
    p.add_argument("--game-count", dest="gameCount", type=int, default=10)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one command. Returns 0 on success, 1 on any error payload."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    params = {
        k: v for k, v in vars(args).items()
        if k not in ("command", "backend") and v is not None
    }
    engine = build_statistics_engine(args.backend)
    status, payload = HANDLERS[args.command](engine, params)

    print(json.dumps(payload, indent=2, default=str))
    if status != 200:
        logger.error("%s returned %d", args.command, status)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
