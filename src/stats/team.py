"""Team record and special-teams rates from completed games."""

from collections.abc import Iterable

from src.models.event import Event, EventType, Strength
from src.models.game import Game
from src.models.team import POWER_PLAY_PENALTY_LIMIT, TeamStats
from src.stats.derived import percentage, ratio

_SHOTS_FOR = (EventType.SHOT, EventType.PENALTY_SHOT, EventType.GOAL)


def _tally_record(stats: TeamStats, games: Iterable[Game]) -> None:
    for game in games:
        team_score, opp_score = game.scores_for(stats.team_id)
        stats.games_played += 1
        stats.goals_for += team_score
        stats.goals_against += opp_score

        if team_score > opp_score:
            stats.wins += 1
            stats.points += 2
        elif game.overtime or game.shootout:
            stats.overtime_losses += 1
            stats.points += 1
        else:
            stats.losses += 1


def _tally_events(stats: TeamStats, events: Iterable[Event]) -> None:
    team_id = stats.team_id
    for event in events:
        ours = event.team_id == team_id
        etype = event.event_type

        if etype in _SHOTS_FOR:
            if ours:
                stats.shots_for += 1
            else:
                stats.shots_against += 1

        if etype is EventType.GOAL and event.strength is Strength.POWER_PLAY:
            if ours:
                stats.power_play_goals += 1
            else:
                stats.penalty_kill_goals_against += 1
        elif etype is EventType.PENALTY:
            minutes = int(event.detail("penalty_minutes", 0) or 0)
            if minutes >= POWER_PLAY_PENALTY_LIMIT:
                continue
            if ours:
                stats.penalty_kill_opportunities += 1
            else:
                stats.power_play_opportunities += 1
        elif ours and etype is EventType.FACEOFF_WIN:
            stats.faceoff_wins += 1
        elif ours and etype is EventType.FACEOFF_LOSS:
            stats.faceoff_losses += 1


def calculate_team_stats(
    team_id: str,
    season: str,
    games: dict[str, Game],
    events: Iterable[Event],
) -> TeamStats:
    """Season totals and rates for a team.

    Args:
        team_id: The team.
        season: Season label copied into the result.
        games: The team's completed games in the season, keyed by id.
        events: Events from those games, both sides.

    Returns:
        TeamStats with rates left as None where the denominator is zero.
    """
    stats = TeamStats(team_id=team_id, season=season)
    _tally_record(stats, games.values())
    _tally_events(stats, (e for e in events if e.game_id in games))

    gp = stats.games_played
    stats.goal_differential = stats.goals_for - stats.goals_against
    stats.shot_differential = stats.shots_for - stats.shots_against
    stats.win_percentage = percentage(stats.wins, gp)
    stats.points_percentage = percentage(stats.points, gp * 2)
    stats.points_per_game = ratio(stats.points, gp)
    stats.goals_for_per_game = ratio(stats.goals_for, gp)
    stats.goals_against_per_game = ratio(stats.goals_against, gp)
    stats.power_play_percentage = percentage(
        stats.power_play_goals, stats.power_play_opportunities,
    )
    stats.penalty_kill_percentage = percentage(
        stats.penalty_kill_opportunities - stats.penalty_kill_goals_against,
        stats.penalty_kill_opportunities,
    )
    stats.faceoff_percentage = percentage(
        stats.faceoff_wins, stats.faceoff_wins + stats.faceoff_losses,
    )
    return stats
