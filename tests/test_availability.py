"""Tests for availability reads, display price precedence and stay quotes."""

from datetime import date

import pytest
from sqlalchemy.orm import Session

from litepages.database import Database
from litepages.errors import QuoteError
from litepages.models.availability import AvailabilityEntry
from litepages.models.unit import BookableUnit
from litepages.modules.availability import AvailabilityCalendar, display_price


@pytest.fixture
def calendar(database: Database) -> AvailabilityCalendar:
    return AvailabilityCalendar(database)


def _day(db_session: Session, unit: BookableUnit, day: date, **kwargs) -> AvailabilityEntry:
    entry = AvailabilityEntry(unit_id=unit.id, day=day, **kwargs)
    db_session.add(entry)
    db_session.commit()
    return entry


class TestDisplayPrice:
    def test_direct_price_wins(self):
        entry = AvailabilityEntry(direct_price=80.0, standard_price=100.0, cm_price=120.0)
        assert display_price(entry) == 80.0

    def test_standard_price_before_channel_price(self):
        entry = AvailabilityEntry(standard_price=100.0, cm_price=120.0)
        assert display_price(entry) == 100.0

    def test_channel_price_last(self):
        assert display_price(AvailabilityEntry(cm_price=120.0)) == 120.0

    def test_no_price(self):
        assert display_price(AvailabilityEntry()) is None
        assert display_price(None) is None


def test_date_range_inclusive_and_ordered(db_session: Session, sample_unit: BookableUnit, calendar: AvailabilityCalendar):
    _day(db_session, sample_unit, date(2026, 6, 3), standard_price=95.0, min_stay=2)
    _day(db_session, sample_unit, date(2026, 6, 1), direct_price=90.0, cm_price=99.0)
    _day(db_session, sample_unit, date(2026, 6, 5), is_available=False)

    rows = calendar.date_range(sample_unit.id, date(2026, 6, 1), date(2026, 6, 3))

    assert [r["date"] for r in rows] == ["2026-06-01", "2026-06-03"]
    assert rows[0]["price"] == 90.0
    assert rows[1]["price"] == 95.0
    assert rows[1]["min_stay"] == 2
    assert rows[0]["is_available"] is True
    assert rows[0]["is_blocked"] is False


def test_date_range_empty(sample_unit: BookableUnit, calendar: AvailabilityCalendar):
    assert calendar.date_range(sample_unit.id, date(2026, 1, 1), date(2026, 1, 31)) == []


class TestQuote:
    def test_prices_each_night(self, db_session: Session, sample_unit: BookableUnit, calendar: AvailabilityCalendar):
        _day(db_session, sample_unit, date(2026, 7, 1), direct_price=100.0)
        _day(db_session, sample_unit, date(2026, 7, 2), standard_price=110.0)
        # 2026-07-03 has no row: priced at the unit's base price (140)

        quote = calendar.quote(sample_unit.id, date(2026, 7, 1), date(2026, 7, 4), adults=2)

        assert quote.nights == 3
        assert [r.price for r in quote.nightly_rates] == [100.0, 110.0, 140.0]
        assert quote.nightly_total == 350.0
        assert quote.cleaning_fee == 50.0
        assert quote.subtotal == 400.0
        assert quote.avg_per_night == pytest.approx(116.67)

    def test_to_dict_keys(self, sample_unit: BookableUnit, calendar: AvailabilityCalendar):
        data = calendar.quote(sample_unit.id, date(2026, 7, 1), date(2026, 7, 3)).to_dict()
        assert data["nights"] == 2
        assert data["nightlyRates"][0] == {"date": "2026-07-01", "price": 140.0}
        assert data["nightlyTotal"] == 280.0
        assert data["cleaningFee"] == 50.0
        assert data["subtotal"] == 330.0
        assert data["avgPerNight"] == 140.0

    def test_checkout_must_follow_checkin(self, sample_unit: BookableUnit, calendar: AvailabilityCalendar):
        with pytest.raises(QuoteError, match="after check-in"):
            calendar.quote(sample_unit.id, date(2026, 7, 3), date(2026, 7, 3))

    def test_unknown_room(self, calendar: AvailabilityCalendar):
        with pytest.raises(QuoteError, match="Room not found"):
            calendar.quote(999, date(2026, 7, 1), date(2026, 7, 3))

    def test_too_many_guests(self, sample_unit: BookableUnit, calendar: AvailabilityCalendar):
        with pytest.raises(QuoteError, match="Maximum 6 guests"):
            calendar.quote(sample_unit.id, date(2026, 7, 1), date(2026, 7, 3), adults=5, children=2)

    def test_blocked_night(self, db_session: Session, sample_unit: BookableUnit, calendar: AvailabilityCalendar):
        _day(db_session, sample_unit, date(2026, 7, 2), is_blocked=True, direct_price=100.0)
        with pytest.raises(QuoteError, match="not available"):
            calendar.quote(sample_unit.id, date(2026, 7, 1), date(2026, 7, 4))

    def test_checkout_day_not_checked(self, db_session: Session, sample_unit: BookableUnit, calendar: AvailabilityCalendar):
        _day(db_session, sample_unit, date(2026, 7, 3), is_available=False)
        quote = calendar.quote(sample_unit.id, date(2026, 7, 1), date(2026, 7, 3))
        assert quote.nights == 2

    def test_minimum_stay(self, db_session: Session, sample_unit: BookableUnit, calendar: AvailabilityCalendar):
        _day(db_session, sample_unit, date(2026, 7, 1), direct_price=100.0, min_stay=3)
        with pytest.raises(QuoteError, match="Minimum stay is 3 nights"):
            calendar.quote(sample_unit.id, date(2026, 7, 1), date(2026, 7, 3))

    def test_no_rate(self, db_session: Session, sample_unit: BookableUnit, calendar: AvailabilityCalendar):
        sample_unit.base_price = None
        db_session.commit()
        with pytest.raises(QuoteError, match="No rate for 2026-07-01"):
            calendar.quote(sample_unit.id, date(2026, 7, 1), date(2026, 7, 2))
