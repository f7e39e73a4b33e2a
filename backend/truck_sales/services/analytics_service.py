# Overview: Service-layer analytics for the admin dashboard; view counts and sold-truck history.

"""
Analytics Aggregator

PERIODS: day (now-1d), week (now-7d), month (now-1 calendar month), all
(epoch). The period bounds total_views and top_viewed_trucks.

sold_trucks ignores the period and always lists the most recently updated
SOLD trucks; the dashboard labels it accordingly.

views_by_day has a fixed bucket count per period (1/7/30/90) of UTC
calendar days ending today, oldest first, computed with one grouped query
and zero-filled here.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta

from sqlalchemy import func

from ..extensions import db
from ..models import Truck, TruckView
from ..time_utils import months_before, start_of_day, to_utc_z, utcnow

PERIODS = ("day", "week", "month", "all")
BUCKETS_BY_PERIOD = {"day": 1, "week": 7, "month": 30, "all": 90}
TOP_TRUCKS_LIMIT = 10
SOLD_TRUCKS_LIMIT = 10
EPOCH = datetime(1970, 1, 1)


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


def period_start(period: str, now: datetime) -> datetime:
    if period == "day":
        return now - timedelta(days=1)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return months_before(now, 1)
    if period == "all":
        return EPOCH
    raise ReportError(f"period must be one of: {', '.join(PERIODS)}")


def count_views(start: datetime) -> int:
    return int(
        db.session.query(func.count(TruckView.id))
        .filter(TruckView.timestamp >= start)
        .scalar()
        or 0
    )


def top_viewed_trucks(start: datetime, limit: int = TOP_TRUCKS_LIMIT) -> list[dict]:
    views = func.count(TruckView.id).label("views")
    rows = (
        db.session.query(Truck.id, Truck.title, Truck.year, Truck.make, Truck.model, views)
        .join(TruckView, TruckView.truck_id == Truck.id)
        .filter(TruckView.timestamp >= start)
        .group_by(Truck.id, Truck.title, Truck.year, Truck.make, Truck.model)
        .order_by(views.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": row.id,
            "title": row.title,
            "year": row.year,
            "make": row.make,
            "model": row.model,
            "views": int(row.views or 0),
        }
        for row in rows
    ]


def recent_sold_trucks(limit: int = SOLD_TRUCKS_LIMIT) -> list[dict]:
    trucks = (
        db.session.query(Truck)
        .filter(Truck.status == "SOLD")
        .order_by(Truck.updated_at.desc(), Truck.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": t.id,
            "title": t.title,
            "year": t.year,
            "make": t.make,
            "model": t.model,
            "price_cents": t.effective_price_cents,
            "listing_type": t.listing_type,
            "sold_date": to_utc_z(t.updated_at),
        }
        for t in trucks
    ]


def _day_key(value) -> str:
    # SQLite returns 'YYYY-MM-DD' text, PostgreSQL a date
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")
    return str(value)[:10]


def views_by_day(buckets: int, now: datetime) -> list[dict]:
    """
    [{date, count}] for `buckets` UTC days ending today, oldest first.
    Each bucket counts views in [date 00:00, date+1 00:00).
    """
    today = start_of_day(now)
    first_day = today - timedelta(days=buckets - 1)
    end = today + timedelta(days=1)

    day = func.date(TruckView.timestamp).label("day")
    rows = (
        db.session.query(day, func.count(TruckView.id).label("count"))
        .filter(TruckView.timestamp >= first_day, TruckView.timestamp < end)
        .group_by(day)
        .all()
    )
    counts = {_day_key(row.day): int(row.count or 0) for row in rows}

    result = []
    for offset in range(buckets):
        key = (first_day + timedelta(days=offset)).strftime("%Y-%m-%d")
        result.append({"date": key, "count": counts.get(key, 0)})
    return result


def get_analytics(period: str = "week", now: datetime | None = None) -> dict:
    if period not in PERIODS:
        raise ReportError(f"period must be one of: {', '.join(PERIODS)}")

    now = now or utcnow()
    start = period_start(period, now)

    return {
        "period": period,
        "start_date": to_utc_z(start),
        "total_views": count_views(start),
        "top_viewed_trucks": top_viewed_trucks(start),
        "sold_trucks": recent_sold_trucks(),
        "views_by_day": views_by_day(BUCKETS_BY_PERIOD[period], now),
    }
