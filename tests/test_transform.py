"""Tests for the transform layer."""

import pytest

from src.models.event import EventType
from src.models.player import Position
from src.transform.clean import (
    minutes_to_toi,
    normalize_player_name,
    seconds_to_toi,
    toi_minutes,
    toi_to_seconds,
)
from src.transform.normalize import normalize_event_type, normalize_game_status, normalize_position


class TestNormalizePlayerName:
    def test_strips_whitespace(self) -> None:
        assert normalize_player_name("  Sam Reinhart  ") == "Sam Reinhart"

    def test_removes_accents(self) -> None:
        assert normalize_player_name("Zoé Lavoie") == "Zoe Lavoie"

    def test_collapses_multiple_spaces(self) -> None:
        assert normalize_player_name("Kyle   Okposo") == "Kyle Okposo"


class TestTimeOnIce:
    def test_toi_to_seconds(self) -> None:
        assert toi_to_seconds("15:30") == 930

    def test_invalid_seconds(self) -> None:
        with pytest.raises(ValueError):
            toi_to_seconds("15:75")

    def test_invalid_format(self) -> None:
        with pytest.raises(ValueError):
            toi_to_seconds("15")

    def test_seconds_to_toi(self) -> None:
        assert seconds_to_toi(3661) == "61:01"

    def test_toi_minutes_from_string(self) -> None:
        assert toi_minutes("12:30") == 12.5

    def test_toi_minutes_from_number(self) -> None:
        assert toi_minutes(18) == 18.0

    def test_toi_minutes_missing(self) -> None:
        assert toi_minutes(None) == 0.0

    def test_minutes_to_toi(self) -> None:
        assert minutes_to_toi(12.5) == "12:30"


class TestNormalizePosition:
    def test_forward_codes(self) -> None:
        for code in ("C", "L", "R", "LW", "RW", "F"):
            assert normalize_position(code) is Position.FORWARD

    def test_defense_and_goalie(self) -> None:
        assert normalize_position("rd") is Position.DEFENSE
        assert normalize_position("G") is Position.GOALIE

    def test_unknown_code(self) -> None:
        with pytest.raises(ValueError):
            normalize_position("X")


class TestNormalizeEventType:
    def test_canonical(self) -> None:
        assert normalize_event_type("Goal") is EventType.GOAL

    def test_legacy_names(self) -> None:
        assert normalize_event_type("blocked_shot") is EventType.SHOT_BLOCKED
        assert normalize_event_type("faceoff_won") is EventType.FACEOFF_WIN

    def test_non_stat_event(self) -> None:
        assert normalize_event_type("shift_start") is None


class TestNormalizeGameStatus:
    def test_final_is_completed(self) -> None:
        assert normalize_game_status("FINAL") == "completed"

    def test_missing_is_scheduled(self) -> None:
        assert normalize_game_status(None) == "scheduled"
