"""Tests for the seller and admin dashboard reports."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from bureauto.services.reports import (
    NOT_FOUND_LABEL,
    average_listing_seconds,
    get_sold_by_category_report,
    get_sold_report,
    get_status_report,
    get_time_report,
    get_view_contact_report,
    sold_percentage,
    views_per_contact,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _scalar(value):
    result = MagicMock()
    result.scalar.return_value = value
    return result


def _first(row):
    result = MagicMock()
    result.first.return_value = row
    return result


def _all(rows):
    result = MagicMock()
    result.all.return_value = rows
    return result


def _db(*results):
    db = AsyncMock()
    db.execute = AsyncMock(side_effect=list(results))
    return db


class TestViewsPerContact:
    def test_no_views(self):
        report = views_per_contact(0, 0)
        assert (report.total_views, report.total_contacts, report.report) == (0, 0, 0)

    def test_no_contacts(self):
        report = views_per_contact(100, 0)
        assert (report.total_views, report.total_contacts, report.report) == (100, 0, 0)

    @pytest.mark.parametrize(
        "views, contacts, expected",
        [(100, 3, 33), (5, 2, 3), (7, 2, 4), (10, 4, 3), (9, 9, 1)],
    )
    def test_rounds_half_up(self, views, contacts, expected):
        assert views_per_contact(views, contacts).report == expected

    def test_serialises_with_client_keys(self):
        dumped = views_per_contact(10, 5).model_dump(by_alias=True)
        assert dumped == {"totalViews": 10, "totalContacts": 5, "report": 2}


class TestViewContactReport:
    @pytest.mark.asyncio
    async def test_no_views_skips_contact_query(self):
        db = _db(_scalar(0))
        report = await get_view_contact_report(db, user_id=7)
        assert report.report == 0
        assert db.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_user_scope_filters_contacts_by_owned_ads(self):
        db = _db(_scalar(120), _scalar(4))
        report = await get_view_contact_report(db, user_id=7)

        assert (report.total_views, report.total_contacts, report.report) == (120, 4, 30)
        contacts_sql = str(db.execute.await_args_list[1].args[0].compile())
        assert "chats.advertisement_id IN" in contacts_sql

    @pytest.mark.asyncio
    async def test_admin_scope_counts_every_chat(self):
        db = _db(_scalar(50), _scalar(0))
        report = await get_view_contact_report(db)
        assert (report.total_views, report.total_contacts, report.report) == (50, 0, 0)
        contacts_sql = str(db.execute.await_args_list[1].args[0].compile())
        assert "WHERE" not in contacts_sql


class TestSoldReport:
    @pytest.mark.parametrize(
        "sold, total, expected",
        [(0, 0, "0,00%"), (3, 10, "30,00%"), (1, 3, "33,33%"), (2, 2, "100,00%")],
    )
    def test_sold_percentage(self, sold, total, expected):
        assert sold_percentage(sold, total) == expected

    @pytest.mark.asyncio
    async def test_user_report(self):
        db = _db(_scalar(3), _scalar(10))
        report = await get_sold_report(db, user_id=7)
        assert report.sold == 3
        assert report.percentage == "30,00%"

    @pytest.mark.asyncio
    async def test_empty_store(self):
        db = _db(_scalar(None), _scalar(None))
        report = await get_sold_report(db)
        assert report.sold == 0
        assert report.percentage == "0,00%"


class TestStatusReport:
    @pytest.mark.asyncio
    async def test_pairs_description_with_count(self):
        db = _db(_all([("Ativo", 12), ("Vendido", 3)]))
        report = await get_status_report(db)
        assert [(item.status, item.total) for item in report] == [("Ativo", 12), ("Vendido", 3)]


class TestSoldByCategoryReport:
    @pytest.mark.asyncio
    async def test_leaders_per_category(self):
        db = _db(_first(("Honda", 5)), _first(("Civic", 3)), _first((2016, 3)))
        report = await get_sold_by_category_report(db, user_id=7)
        assert [(item.category, item.result) for item in report] == [
            ("Marca mais vendida", "Honda"),
            ("Modelo mais vendido", "Civic"),
            ("Ano do modelo mais vendido", "2016"),
        ]

    @pytest.mark.asyncio
    async def test_missing_or_null_winner(self):
        db = _db(_first(None), _first((None, 4)), _first(None))
        report = await get_sold_by_category_report(db)
        assert all(item.result == NOT_FOUND_LABEL for item in report)


class TestTimeReport:
    def test_average_subtracts_paused_time(self):
        created = [NOW - timedelta(days=2), NOW - timedelta(days=1)]
        # 3 days listed in total, 1 day paused, over 2 ads
        assert average_listing_seconds(created, 86400, NOW) == 86400

    def test_no_advertisements(self):
        assert average_listing_seconds([], 0, NOW) == 0

    def test_never_negative(self):
        assert average_listing_seconds([NOW - timedelta(seconds=10)], 100, NOW) == 0

    def test_naive_timestamps_are_treated_as_utc(self):
        created = [(NOW - timedelta(hours=1)).replace(tzinfo=None)]
        assert average_listing_seconds(created, 0, NOW) == 3600

    @pytest.mark.asyncio
    async def test_formats_in_portuguese(self):
        rows = [(NOW - timedelta(days=1, hours=2, minutes=3, seconds=4), 0)]
        db = _db(_all(rows))
        report = await get_time_report(db, user_id=7, now=NOW)
        assert report == "1 dia(s), 2 hora(s), 3 minuto(s), 4 segundo(s)"

    @pytest.mark.asyncio
    async def test_default_when_user_has_no_listings(self):
        db = _db(_all([]))
        report = await get_time_report(db, user_id=7, now=NOW)
        assert report == "0 dia(s), 0 hora(s), 0 minuto(s), 0 segundo(s)"
