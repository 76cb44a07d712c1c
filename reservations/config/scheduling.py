"""
reservations.config.scheduling – booking rules (business hours, durations, lead time, codes).

Env vars: BOOKING_OPEN_TIME, BOOKING_CLOSE_TIME, BOOKING_SLOT_MINUTES,
BOOKING_MIN_DURATION_MINUTES, BOOKING_MAX_DURATION_MINUTES, BOOKING_LEAD_TIME_MINUTES,
BOOKING_CODE_PREFIX, BOOKING_CODE_LENGTH, BOOKING_CODE_MAX_ATTEMPTS.
"""
from __future__ import annotations

import datetime as _dt
import os
import re
from dataclasses import dataclass

from reservations.core.exceptions import ConfigurationError

_PREFIX_PATTERN = re.compile(r"^[A-Z0-9]+$")


def _parse_time(value: str, name: str) -> _dt.time:
    try:
        return _dt.time.fromisoformat(value.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be HH:MM, got {value!r}") from exc


def _parse_int(value: object, name: str) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def _validate_positive_int(value: int, name: str) -> int:
    if not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
    return value


def _minutes(t: _dt.time) -> int:
    return t.hour * 60 + t.minute


@dataclass(frozen=True)
class SchedulingConfig:
    """
    Rules every persisted appointment must satisfy.

    Defaults describe an 08:00–20:00 business day split into 30-minute slots,
    appointments of 15 minutes to 8 hours booked at least 2 hours ahead, and
    confirmation codes shaped like ``APT-A8F3``.
    """

    open_time: _dt.time = _dt.time(8, 0)
    close_time: _dt.time = _dt.time(20, 0)
    slot_minutes: int = 30
    min_duration_minutes: int = 15
    max_duration_minutes: int = 480
    lead_time_minutes: int = 120
    code_prefix: str = "APT"
    code_length: int = 4
    code_max_attempts: int = 10

    def __post_init__(self) -> None:
        if self.open_time >= self.close_time:
            raise ConfigurationError("open_time must be earlier than close_time")
        for name in (
            "slot_minutes",
            "min_duration_minutes",
            "max_duration_minutes",
            "code_length",
            "code_max_attempts",
        ):
            _validate_positive_int(getattr(self, name), name)
        if not isinstance(self.lead_time_minutes, int) or self.lead_time_minutes < 0:
            raise ConfigurationError(f"lead_time_minutes must be a non-negative integer, got {self.lead_time_minutes!r}")
        if self.min_duration_minutes > self.max_duration_minutes:
            raise ConfigurationError("min_duration_minutes must not exceed max_duration_minutes")
        if self.business_minutes % self.slot_minutes:
            raise ConfigurationError(
                f"slot_minutes ({self.slot_minutes}) must divide the business day "
                f"({self.business_minutes} minutes)"
            )
        if not _PREFIX_PATTERN.match(self.code_prefix or ""):
            raise ConfigurationError("code_prefix must be non-empty uppercase alphanumeric")

    @property
    def business_minutes(self) -> int:
        return _minutes(self.close_time) - _minutes(self.open_time)

    @property
    def slot_width(self) -> _dt.timedelta:
        return _dt.timedelta(minutes=self.slot_minutes)

    @property
    def min_duration(self) -> _dt.timedelta:
        return _dt.timedelta(minutes=self.min_duration_minutes)

    @property
    def max_duration(self) -> _dt.timedelta:
        return _dt.timedelta(minutes=self.max_duration_minutes)

    @property
    def lead_time(self) -> _dt.timedelta:
        return _dt.timedelta(minutes=self.lead_time_minutes)

    @classmethod
    def from_env(cls, **overrides: object) -> SchedulingConfig:
        """
        Build config from environment variables. Overrides (keyword args)
        take precedence over env; unset values keep the dataclass defaults.
        """
        values: dict = {}
        for attr, var in (("open_time", "BOOKING_OPEN_TIME"), ("close_time", "BOOKING_CLOSE_TIME")):
            raw = overrides.get(attr, os.environ.get(var))
            if raw is not None:
                values[attr] = raw if isinstance(raw, _dt.time) else _parse_time(str(raw), var)

        for attr, var in (
            ("slot_minutes", "BOOKING_SLOT_MINUTES"),
            ("min_duration_minutes", "BOOKING_MIN_DURATION_MINUTES"),
            ("max_duration_minutes", "BOOKING_MAX_DURATION_MINUTES"),
            ("lead_time_minutes", "BOOKING_LEAD_TIME_MINUTES"),
            ("code_length", "BOOKING_CODE_LENGTH"),
            ("code_max_attempts", "BOOKING_CODE_MAX_ATTEMPTS"),
        ):
            raw = overrides.get(attr, os.environ.get(var))
            if raw is not None:
                values[attr] = _parse_int(raw, var)

        prefix = overrides.get("code_prefix", os.environ.get("BOOKING_CODE_PREFIX"))
        if prefix is not None:
            values["code_prefix"] = str(prefix).strip().upper()
        return cls(**values)


def load_scheduling_config(**overrides: object) -> SchedulingConfig:
    """Load and validate booking rules from environment (with optional overrides)."""
    return SchedulingConfig.from_env(**overrides)
