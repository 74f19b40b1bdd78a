"""Cleaning helpers for names and time-on-ice values."""

import unicodedata


def normalize_player_name(name: str) -> str:
    """Normalize a player name by removing accents and standardizing format.

    Examples:
        >>> normalize_player_name("  Zoé   Lavoie ")
        'Zoe Lavoie'
    """
    name = name.strip()

    nfkd = unicodedata.normalize("NFKD", name)
    name = "".join(c for c in nfkd if not unicodedata.combining(c))

    return " ".join(name.split())


def toi_to_seconds(toi: str) -> int:
    """Convert a time string 'MM:SS' to total seconds.

    Examples:
        >>> toi_to_seconds("15:30")
        930

    Raises:
        ValueError: If the string isn't MM:SS with 0 <= SS < 60.
    """
    parts = toi.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Time must be in MM:SS format: {toi!r}")
    minutes, seconds = int(parts[0]), int(parts[1])
    if minutes < 0 or not 0 <= seconds < 60:
        raise ValueError(f"Invalid time value: {toi!r}")
    return minutes * 60 + seconds


def seconds_to_toi(total_seconds: int) -> str:
    """Convert seconds to 'M:SS'.

    Examples:
        >>> seconds_to_toi(3661)
        '61:01'
    """
    if total_seconds < 0:
        raise ValueError("Seconds must be non-negative")
    minutes, seconds = divmod(int(total_seconds), 60)
    return f"{minutes}:{seconds:02d}"


def toi_minutes(value: object) -> float:
    """Read a time_on_ice detail as minutes. Numbers are minutes, strings are MM:SS."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    return toi_to_seconds(str(value)) / 60.0


def minutes_to_toi(minutes: float) -> str:
    return seconds_to_toi(round(minutes * 60))
