# backend/tests/unit/core/test_config_and_clock.py
from datetime import date, datetime, time
import logging

from pydantic import ValidationError
import pytest

from eduvibe.core.clock import Clock, SystemClock, localize, today
from eduvibe.core.config import MatchWeights, Settings
from eduvibe.core.logging import setup_logging
from eduvibe.core.ulid_helper import generate_ulid, is_valid_ulid, parse_ulid
from tests.helpers.clock import FrozenClock


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.session_duration_minutes == 120
        assert settings.default_timezone == "Asia/Colombo"
        assert settings.match_weights == MatchWeights()

    def test_weights_from_environment(self, monkeypatch):
        monkeypatch.setenv("MATCH_LANGUAGE_WEIGHT", "4.5")

        settings = Settings(_env_file=None)

        assert settings.match_weights.language == 4.5
        assert settings.match_weights.subject == 10.0

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_timezone="Mars/Olympus")

    def test_negative_weight_from_environment_rejected(self, monkeypatch):
        monkeypatch.setenv("MATCH_RATING_WEIGHT", "-1")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_zero_weight_allowed(self, monkeypatch):
        monkeypatch.setenv("MATCH_LANGUAGE_WEIGHT", "0")

        assert Settings(_env_file=None).match_weights.language == 0.0

    def test_negative_match_weights_rejected(self):
        with pytest.raises(ValueError, match="subject"):
            MatchWeights(subject=-10.0)


class TestClock:
    def test_system_clock_is_aware(self):
        clock = SystemClock("Asia/Colombo")

        assert isinstance(clock, Clock)
        assert clock.now().tzinfo is not None
        assert clock.tz.zone == "Asia/Colombo"

    def test_frozen_clock_satisfies_protocol(self):
        clock = FrozenClock(datetime(2025, 6, 2, 23, 30))

        assert isinstance(clock, Clock)
        assert today(clock) == date(2025, 6, 2)

    def test_localize_uses_clock_timezone(self):
        clock = FrozenClock(datetime(2025, 6, 2, 8, 0))

        start = localize(clock, date(2025, 6, 3), time(9, 0))

        assert start.utcoffset().total_seconds() == 5.5 * 3600
        assert start > clock.now()


class TestUlidHelper:
    def test_generated_ids_parse(self):
        value = generate_ulid()

        assert len(value) == 26
        assert is_valid_ulid(value)
        assert str(parse_ulid(value)) == value

    def test_garbage_is_not_a_ulid(self):
        assert parse_ulid("not-a-ulid") is None
        assert not is_valid_ulid("")


def test_setup_logging_honours_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))

    setup_logging("debug")

    assert calls["level"] == logging.DEBUG
    assert "%(name)s" in calls["format"]
