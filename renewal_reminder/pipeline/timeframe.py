from __future__ import annotations

from datetime import date

import pendulum

SECONDS_PER_DAY = 24 * 60 * 60


def today_in(tz: str = "local") -> date:
    return pendulum.today(tz).date()


def midnight_timestamp(day: date, tz: str = "local") -> float:
    return pendulum.datetime(day.year, day.month, day.day, tz=tz).timestamp()


def days_between(start: date, end: date, tz: str = "local") -> int:
    # Rounded so a DST-shortened or -lengthened day still lands in its bucket.
    elapsed = midnight_timestamp(end, tz) - midnight_timestamp(start, tz)
    return round(elapsed / SECONDS_PER_DAY)
