"""
Analytics Aggregator tests.

Reports are built with a fixed `now` so bucket dates are deterministic.
"""

from datetime import datetime, timedelta

import pytest

from truck_sales.extensions import db
from truck_sales.models import Truck, TruckView
from truck_sales.services import analytics_service
from truck_sales.services.analytics_service import ReportError


NOW = datetime(2026, 3, 15, 12, 0, 0)


def _add_views(truck_id, *timestamps):
    for ts in timestamps:
        db.session.add(TruckView(truck_id=truck_id, timestamp=ts))
    db.session.commit()


class TestPeriodBounds:

    def test_period_starts(self):
        assert analytics_service.period_start("day", NOW) == NOW - timedelta(days=1)
        assert analytics_service.period_start("week", NOW) == NOW - timedelta(days=7)
        assert analytics_service.period_start("month", NOW) == datetime(2026, 2, 15, 12, 0, 0)
        assert analytics_service.period_start("all", NOW) == datetime(1970, 1, 1)

    def test_month_clamps_short_months(self):
        assert analytics_service.period_start("month", datetime(2026, 3, 31, 8, 0)) == datetime(2026, 2, 28, 8, 0)

    def test_unknown_period_raises(self):
        with pytest.raises(ReportError):
            analytics_service.get_analytics("fortnight", now=NOW)


class TestViewsByDay:

    @pytest.mark.parametrize("period,buckets", [("day", 1), ("week", 7), ("month", 30), ("all", 90)])
    def test_bucket_count_per_period(self, period, buckets):
        report = analytics_service.get_analytics(period, now=NOW)

        days = report["views_by_day"]
        assert len(days) == buckets
        assert days[-1]["date"] == "2026-03-15"
        assert all(d["count"] == 0 for d in days)

    def test_week_buckets_are_oldest_first_and_zero_filled(self, make_truck):
        truck = make_truck()
        _add_views(
            truck["id"],
            NOW - timedelta(hours=1),
            NOW - timedelta(hours=2),
            datetime(2026, 3, 13, 0, 0, 0),
            datetime(2026, 3, 8, 23, 59, 59),
        )

        days = analytics_service.get_analytics("week", now=NOW)["views_by_day"]

        assert [d["date"] for d in days] == [
            "2026-03-09", "2026-03-10", "2026-03-11", "2026-03-12",
            "2026-03-13", "2026-03-14", "2026-03-15",
        ]
        assert [d["count"] for d in days] == [0, 0, 0, 0, 1, 0, 2]


class TestTotals:

    @pytest.fixture
    def spread_views(self, make_truck):
        truck = make_truck()
        _add_views(
            truck["id"],
            NOW - timedelta(hours=1),
            NOW - timedelta(days=2),
            NOW - timedelta(days=10),
            NOW - timedelta(days=40),
        )
        return truck

    @pytest.mark.parametrize("period,expected", [("day", 1), ("week", 2), ("month", 3), ("all", 4)])
    def test_total_views_respects_period(self, spread_views, period, expected):
        report = analytics_service.get_analytics(period, now=NOW)
        assert report["period"] == period
        assert report["total_views"] == expected

    def test_start_date_is_serialized(self, spread_views):
        report = analytics_service.get_analytics("week", now=NOW)
        assert report["start_date"] == "2026-03-08T12:00:00Z"


class TestTopViewed:

    def test_sorted_desc_and_capped_at_ten(self, make_truck):
        trucks = [make_truck() for _ in range(12)]
        for count, truck in enumerate(trucks, start=1):
            _add_views(truck["id"], *[NOW - timedelta(minutes=m + 1) for m in range(count)])

        top = analytics_service.get_analytics("day", now=NOW)["top_viewed_trucks"]

        assert len(top) == 10
        assert [t["views"] for t in top] == list(range(12, 2, -1))
        assert top[0]["id"] == trucks[-1]["id"]
        assert set(top[0]) == {"id", "title", "year", "make", "model", "views"}

    def test_only_views_in_period_count(self, make_truck):
        old = make_truck()
        recent = make_truck()
        _add_views(old["id"], *[NOW - timedelta(days=20)] * 5)
        _add_views(recent["id"], NOW - timedelta(hours=3))

        top = analytics_service.get_analytics("week", now=NOW)["top_viewed_trucks"]
        assert [t["id"] for t in top] == [recent["id"]]


class TestSoldTrucks:

    def test_sold_trucks_ignore_period(self, make_truck):
        truck = make_truck(status="SOLD")
        row = db.session.get(Truck, truck["id"])
        row.updated_at = NOW - timedelta(days=200)
        db.session.commit()

        sold = analytics_service.get_analytics("day", now=NOW)["sold_trucks"]

        assert [s["id"] for s in sold] == [truck["id"]]
        assert sold[0]["sold_date"] == "2025-08-27T12:00:00Z"
        assert sold[0]["price_cents"] == truck["price_cents"]
        assert sold[0]["listing_type"] == "SALE"

    def test_lease_reports_monthly_price(self, make_truck):
        make_truck(status="SOLD", listing_type="LEASE", price_cents=0, monthly_price_cents=79_900)

        sold = analytics_service.get_analytics("week", now=NOW)["sold_trucks"]
        assert sold[0]["price_cents"] == 79_900

    def test_available_trucks_are_not_listed(self, make_truck):
        make_truck(status="AVAILABLE")
        make_truck(status="PENDING_SALE")

        assert analytics_service.get_analytics("all", now=NOW)["sold_trucks"] == []


class TestAnalyticsRoute:

    def test_requires_auth(self, client):
        assert client.get("/api/analytics").status_code == 401

    def test_default_period_is_week(self, client, admin_headers):
        resp = client.get("/api/analytics", headers=admin_headers)

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["period"] == "week"
        assert len(body["views_by_day"]) == 7
        assert set(body) == {
            "period", "start_date", "total_views", "top_viewed_trucks", "sold_trucks", "views_by_day",
        }

    def test_bad_period_is_400(self, client, admin_headers):
        resp = client.get("/api/analytics?period=fortnight", headers=admin_headers)

        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "Invalid data"
        assert body["details"][0]["field"] == "period"
