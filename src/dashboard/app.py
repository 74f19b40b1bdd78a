"""Streamlit dashboard for exploring a team's stats.

Reads through the same StatisticsEngine as the API handlers, so the
numbers match. Backend is chosen with the STATS_BACKEND env var.
"""

import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path

# Streamlit adds the script's directory to sys.path, but other modules
# import from the project root (e.g. "from src.stats.engine import ...").
# Ensure the project root is on sys.path so those imports resolve.
_PROJECT_ROOT = str(Path(__file__).resolve().parents[2])
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

import pandas as pd  # noqa: E402
import streamlit as st  # noqa: E402
from dotenv import load_dotenv  # noqa: E402

from src.api.handlers import build_statistics_engine  # noqa: E402
from src.api.serialize import to_payload  # noqa: E402
from src.models.player import Player  # noqa: E402
from src.models.reports import LeaderboardQuery  # noqa: E402
from src.stats.categories import StatCategory  # noqa: E402
from src.stats.engine import StatisticsEngine  # noqa: E402
from src.stats.errors import StatsError  # noqa: E402
from src.transform.clean import minutes_to_toi  # noqa: E402

load_dotenv()

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Team Stats", layout="wide")

CATEGORY_NAMES = [c.value for c in StatCategory]


@st.cache_resource
def get_engine(backend: str) -> StatisticsEngine:
    """Build one engine (and its cache) per backend for the session."""
    return build_statistics_engine(backend)


def _roster(engine: StatisticsEngine, team_id: str) -> list[Player]:
    return engine.store.get_roster(team_id)


def _pick_player(engine: StatisticsEngine, team_id: str, key: str) -> Player | None:
    roster = _roster(engine, team_id)
    if not roster:
        st.info(f"No active players found for team {team_id}.")
        return None
    labels = {f"#{p.jersey_number or '-'} {p.full_name} ({p.position.value})": p for p in roster}
    return labels[st.selectbox("Player", list(labels), key=key)]


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


def page_leaderboard(engine: StatisticsEngine, team_id: str, season: str) -> None:
    """Top players in one category."""
    st.header("Leaderboard")

    cols = st.columns(4)
    category = cols[0].selectbox("Category", CATEGORY_NAMES, index=CATEGORY_NAMES.index("points"))
    position = cols[1].selectbox("Position", ["all", "F", "D", "G"])
    limit = cols[2].number_input("Limit", min_value=1, value=10, step=1)
    min_games = cols[3].number_input("Min Games Played", min_value=0, value=5, step=1)

    board = engine.get_leaderboard(LeaderboardQuery(
        team_id=team_id,
        season=season,
        category=category,
        position=position,
        limit=int(limit),
        min_games=int(min_games),
    ))
    if board.excluded:
        st.warning(f"Stats unavailable for {len(board.excluded)} player(s); they are left out.")
    if not board.leaders:
        st.info("No players qualify yet.")
        return

    df = pd.DataFrame(to_payload(board.leaders))
    df.insert(0, "rank", range(1, len(df) + 1))
    st.dataframe(df, use_container_width=True, hide_index=True)


def page_player_card(engine: StatisticsEngine, team_id: str, season: str) -> None:
    """One player's totals, rates and game log."""
    st.header("Player Card")

    player = _pick_player(engine, team_id, key="card_player")
    if player is None:
        return

    stats = engine.get_player_stats(player.player_id, team_id, season, include_advanced=True)
    base = stats.base_stats

    cols = st.columns(5)
    cols[0].metric("Games", base.games_played)
    cols[1].metric("Goals", base.goals)
    cols[2].metric("Assists", base.assists)
    cols[3].metric("Points", base.points)
    cols[4].metric("PIM", base.penalty_minutes)

    rankings = engine.get_team_rankings(player.player_id, team_id, season)
    st.caption(
        f"Team rank: goals #{rankings.goals}, assists #{rankings.assists}, "
        f"points #{rankings.points}, PIM #{rankings.penalty_minutes}"
    )

    st.subheader("Rates")
    derived = {k: v for k, v in to_payload(stats.derived_stats).items() if v is not None}
    st.dataframe(pd.DataFrame([derived]), use_container_width=True, hide_index=True)

    if stats.advanced_metrics is not None:
        st.subheader("Advanced")
        st.dataframe(
            pd.DataFrame([to_payload(stats.advanced_metrics)]),
            use_container_width=True,
            hide_index=True,
        )

    st.subheader("Game Log")
    log = engine.get_player_game_log(player.player_id, team_id, season)
    if log:
        df = pd.DataFrame(to_payload(log))
        df["timeOnIce"] = df["timeOnIce"].map(minutes_to_toi)
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.info("No games played yet.")


def page_trends(engine: StatisticsEngine, team_id: str, season: str) -> None:
    """Per-game values and running average of one stat."""
    st.header("Trends")

    player = _pick_player(engine, team_id, key="trend_player")
    if player is None:
        return

    cols = st.columns(2)
    stat = cols[0].selectbox("Stat", CATEGORY_NAMES, index=CATEGORY_NAMES.index("points"))
    game_count = cols[1].number_input("Games", min_value=1, value=10, step=1)

    trend = engine.get_player_trend(player.player_id, team_id, season, stat=stat, game_count=int(game_count))
    if not trend.games:
        st.info("No games with this stat yet.")
        return

    st.metric("Trend", trend.overall_trend.value.title(), f"{trend.trend_percentage:.2f}%")
    df = pd.DataFrame(to_payload(trend.games)).set_index("date")
    st.line_chart(df[["value", "runningAverage"]])
    st.dataframe(df.reset_index(), use_container_width=True, hide_index=True)


def page_team(engine: StatisticsEngine, team_id: str, season: str) -> None:
    """Team record, special teams and roster table."""
    st.header("Team")

    stats = engine.get_team_stats(team_id, season)
    cols = st.columns(5)
    cols[0].metric("Record", f"{stats.wins}-{stats.losses}-{stats.overtime_losses}")
    cols[1].metric("Points", stats.points)
    cols[2].metric("Goal Diff", stats.goal_differential)
    cols[3].metric("PP%", "-" if stats.power_play_percentage is None else f"{stats.power_play_percentage:.1f}")
    cols[4].metric("PK%", "-" if stats.penalty_kill_percentage is None else f"{stats.penalty_kill_percentage:.1f}")

    st.subheader("Roster")
    sort_by = st.selectbox("Sort by", CATEGORY_NAMES, index=CATEGORY_NAMES.index("points"), key="team_sort")
    players = engine.get_team_player_stats(team_id, season, sort_by=sort_by)
    if not players:
        st.info("No roster stats yet.")
        return

    rows = []
    for s in players:
        row = {"player": s.player.full_name, "position": s.player.position.value}
        row.update(to_payload(s.base_stats))
        rows.append(row)
    df = pd.DataFrame(rows).drop(columns=["playerId", "teamId", "season"])
    st.dataframe(df, use_container_width=True, hide_index=True)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

PAGES: dict[str, Callable[[StatisticsEngine, str, str], None]] = {
    "Leaderboard": page_leaderboard,
    "Player Card": page_player_card,
    "Trends": page_trends,
    "Team": page_team,
}


def main() -> None:
    """Dashboard entry point."""
    st.title("Team Stats Dashboard")

    backend = os.getenv("STATS_BACKEND", "postgres")
    st.sidebar.markdown(f"**Backend:** `{backend}`")

    page = st.sidebar.radio("Navigation", list(PAGES))
    team_id = st.sidebar.text_input("Team ID", os.getenv("STATS_DEFAULT_TEAM", ""))
    season = st.sidebar.text_input("Season", os.getenv("STATS_DEFAULT_SEASON", ""))
    if not team_id or not season:
        st.info("Enter a team id and season in the sidebar.")
        return

    engine = get_engine(backend)
    try:
        PAGES[page](engine, team_id, season)
    except StatsError as exc:
        logger.warning("%s page failed: %s", page, exc)
        st.error(f"{exc.message} ({exc.code})")
        st.stop()


main()
