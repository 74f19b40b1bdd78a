"""Derived rate and percentage metrics.

Every metric is guarded by its denominator: a zero denominator leaves the
field as None rather than producing 0 or NaN. Nothing is rounded here.
"""

from src.models.stats import BasePlayerStats, DerivedStats, GoalieStats, SkaterStats, SkillStats


def ratio(numerator: float, denominator: float, scale: float = 1.0) -> float | None:
    """numerator / denominator * scale, or None when the denominator is zero."""
    if not denominator:
        return None
    return numerator / denominator * scale


def percentage(numerator: float, denominator: float) -> float | None:
    return ratio(numerator, denominator, 100.0)


def _skater_metrics(derived: DerivedStats, base: BasePlayerStats, skater: SkaterStats) -> None:
    gp = base.games_played
    derived.shooting_percentage = percentage(base.goals, base.shots)
    derived.shots_per_game = ratio(base.shots, gp)
    derived.hits_per_game = ratio(base.hits, gp)
    derived.blocked_per_game = ratio(base.blocked, gp)
    derived.plus_minus_per_game = ratio(base.plus_minus, gp)
    derived.time_on_ice_per_game = ratio(skater.time_on_ice, gp)
    derived.power_play_points = skater.power_play_goals + skater.power_play_assists
    derived.short_handed_points = skater.short_handed_goals + skater.short_handed_assists
    derived.faceoff_percentage = percentage(
        base.faceoffs_won, base.faceoffs_won + base.faceoffs_lost,
    )


def _goalie_metrics(derived: DerivedStats, base: BasePlayerStats, goalie: GoalieStats) -> None:
    gp = base.games_played
    derived.save_percentage = percentage(goalie.saves, goalie.shots_against)
    derived.goals_against_average = ratio(goalie.goals_against * 60, goalie.time_on_ice)
    derived.shutout_percentage = percentage(goalie.shutouts, gp)
    derived.win_percentage = percentage(
        goalie.wins, goalie.wins + goalie.losses + goalie.overtime_losses,
    )
    derived.shots_against_per_game = ratio(goalie.shots_against, gp)
    derived.saves_per_game = ratio(goalie.saves, gp)


def calculate_derived_stats(base: BasePlayerStats, skill: SkillStats) -> DerivedStats:
    """Compute the DerivedStats that apply to the player's skill variant."""
    derived = DerivedStats(
        points_per_game=ratio(base.points, base.games_played),
        penalty_minutes_per_game=ratio(base.penalty_minutes, base.games_played),
    )
    if isinstance(skill, GoalieStats):
        _goalie_metrics(derived, base, skill)
    else:
        _skater_metrics(derived, base, skill)
    return derived
