"""Business-timezone helpers.

Naive timestamps are taken to already be in the business timezone; aware
ones are converted to it. Calendar-day logic (date filters, grouping) always
goes through ``to_local``.
"""
from datetime import date, datetime, time

import pytz

from fulfillment.core.config import settings


def business_tz(name: str | None = None):
    return pytz.timezone(name or settings.TIMEZONE)


def to_local(moment: datetime, tz=None) -> datetime:
    tz = tz or business_tz()
    if moment.tzinfo is None:
        return tz.localize(moment)
    return moment.astimezone(tz)


def local_date(moment: datetime, tz=None) -> date:
    return to_local(moment, tz).date()


def start_of_day(day: date, tz=None) -> datetime:
    tz = tz or business_tz()
    return tz.localize(datetime.combine(day, time.min))


def end_of_day(day: date, tz=None) -> datetime:
    tz = tz or business_tz()
    return tz.localize(datetime.combine(day, time.max))


def now(tz=None) -> datetime:
    return datetime.now(tz or business_tz())
