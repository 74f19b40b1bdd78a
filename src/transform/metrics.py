"""Per-game series calculations: running averages and linear trend."""

import pandas as pd


def add_running_average(
    df: pd.DataFrame,
    stat_column: str = "value",
    decimals: int = 2,
    window: int | None = None,
) -> pd.DataFrame:
    """Add a running average column to a chronologically ordered frame.

    Args:
        df: DataFrame with one row per game, oldest first.
        stat_column: Column to average.
        decimals: Rounding applied to the averaged column.
        window: Optional rolling window size. None averages every game so far.

    Returns:
        Copy of df with a 'running_average' column.
    """
    df = df.copy()
    series = df[stat_column].astype(float)
    if window is None:
        averaged = series.expanding(min_periods=1).mean()
    else:
        averaged = series.rolling(window, min_periods=1).mean()
    df["running_average"] = averaged.round(decimals)
    return df


def linear_slope(values: list[float]) -> float:
    """Least-squares slope of values against their 1-based index.

    Returns 0.0 for fewer than two values.
    """
    n = len(values)
    if n < 2:
        return 0.0
    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for i, y in enumerate(values, start=1):
        sum_x += i
        sum_y += y
        sum_xy += i * y
        sum_x2 += i * i
    return (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
