"""TimeRangeValidator: ordering, duration, business-hours and lead-time rules."""
from __future__ import annotations

import datetime as _dt
from typing import Optional

from reservations.config.scheduling import SchedulingConfig
from reservations.core.exceptions import InvalidTimeRangeError


def _fmt_duration(delta: _dt.timedelta) -> str:
    minutes = int(delta.total_seconds() // 60)
    if minutes % 60 == 0:
        hours = minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{minutes} minutes"


class TimeRangeValidator:
    """Check a proposed [start, end) interval against the booking rules.

    ``now`` is always supplied by the caller. Rules run in a fixed order and
    the first violation is reported:

    1. start before end
    2. duration at least the minimum
    3. duration at most the maximum
    4. start and end inside business hours
    5. date+start at least the lead time after now
    """

    def __init__(self, config: Optional[SchedulingConfig] = None) -> None:
        self._config = config or SchedulingConfig()

    def validate(
        self,
        date: _dt.date,
        start_time: _dt.time,
        end_time: _dt.time,
        now: _dt.datetime,
    ) -> Optional[InvalidTimeRangeError]:
        """Return None when the interval is acceptable, else the first violation."""
        cfg = self._config
        if start_time >= end_time:
            return InvalidTimeRangeError(
                f"Start time {start_time:%H:%M} must be earlier than end time {end_time:%H:%M}"
            )

        duration = _dt.datetime.combine(date, end_time) - _dt.datetime.combine(date, start_time)
        if duration < cfg.min_duration:
            return InvalidTimeRangeError(
                f"Appointment must last at least {_fmt_duration(cfg.min_duration)}"
            )
        if duration > cfg.max_duration:
            return InvalidTimeRangeError(
                f"Appointment must not last more than {_fmt_duration(cfg.max_duration)}"
            )

        if start_time < cfg.open_time or end_time > cfg.close_time:
            return InvalidTimeRangeError(
                f"Appointments must be between {cfg.open_time:%H:%M} and {cfg.close_time:%H:%M}. "
                f"Requested: {start_time:%H:%M} - {end_time:%H:%M}"
            )

        # Aware `now` makes the appointment instant aware in the same zone
        starts_at = _dt.datetime.combine(date, start_time, tzinfo=now.tzinfo)
        if starts_at < now + cfg.lead_time:
            return InvalidTimeRangeError(
                f"Appointments must be booked at least {_fmt_duration(cfg.lead_time)} in advance"
            )
        return None
