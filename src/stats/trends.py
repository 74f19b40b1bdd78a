"""Per-game trend of one stat: running average plus a linear-fit direction."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

import pandas as pd

from src.models.reports import Trend, TrendDirection, TrendPoint
from src.stats.errors import InvalidRequestError
from src.transform.metrics import add_running_average, linear_slope

# |slope| below this, in stat units per game, counts as flat
STABLE_SLOPE_THRESHOLD = 0.1
DEFAULT_GAME_COUNT = 10


@dataclass
class GameValue:
    """A stat's value in one game."""

    game_id: str
    game_date: date
    opponent: str
    value: float


def classify_trend(values: Sequence[float]) -> tuple[TrendDirection, float]:
    """Classify chronologically ordered values.

    Returns:
        (direction, percentage) where percentage is |slope / mean| * 100,
        rounded to two decimals, and 0 when the mean is 0. Fewer than two
        values are always stable at 0.
    """
    if len(values) < 2:
        return TrendDirection.STABLE, 0.0

    slope = linear_slope(list(values))
    mean = sum(values) / len(values)
    pct = abs(slope / mean) * 100 if mean != 0 else 0.0

    if abs(slope) < STABLE_SLOPE_THRESHOLD:
        direction = TrendDirection.STABLE
    elif slope > 0:
        direction = TrendDirection.IMPROVING
    else:
        direction = TrendDirection.DECLINING
    return direction, round(pct, 2)


def build_trend(
    player_id: str,
    stat: str,
    game_values: Sequence[GameValue],
    game_count: int = DEFAULT_GAME_COUNT,
) -> Trend:
    """Take the most recent game_count games and trend them oldest-first.

    Raises:
        InvalidRequestError: If game_count is below 1.
    """
    if game_count < 1:
        raise InvalidRequestError("gameCount must be at least 1", field="gameCount")
    if not game_values:
        return Trend(player_id=player_id, stat=stat)

    df = pd.DataFrame([vars(gv) for gv in game_values])
    recent = (
        df.sort_values("game_date", ascending=False, kind="stable")
        .head(game_count)
        .iloc[::-1]
        .reset_index(drop=True)
    )
    recent = add_running_average(recent, "value", decimals=2)

    points = [
        TrendPoint(
            game_id=row.game_id,
            date=row.game_date.isoformat(),
            value=float(row.value),
            opponent=row.opponent,
            running_average=float(row.running_average),
        )
        for row in recent.itertuples(index=False)
    ]
    direction, pct = classify_trend([p.value for p in points])
    return Trend(
        player_id=player_id,
        stat=stat,
        games=points,
        overall_trend=direction,
        trend_percentage=pct,
    )
