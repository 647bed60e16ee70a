"""Tests for promo-code resolution and discount arithmetic."""

import logging
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from litepages.database import Database
from litepages.models.offer import Offer
from litepages.models.property import Property
from litepages.models.unit import BookableUnit
from litepages.modules.offers import OfferInfo, OfferResolver, apply_discount, discount_label, stay_qualifies
from litepages.modules.offers.resolver import weekday_number

NOW = datetime(2026, 3, 15, 12, 0)
TODAY = date(2026, 6, 1)
FRIDAY = date(2026, 7, 3)
SUNDAY = date(2026, 7, 5)


@pytest.fixture
def resolver(database: Database) -> OfferResolver:
    return OfferResolver(database)


def _offer(db_session: Session, **kwargs) -> Offer:
    kwargs.setdefault("code", "SUMMER20")
    kwargs.setdefault("discount_type", "percentage")
    kwargs.setdefault("discount_value", 20.0)
    offer = Offer(**kwargs)
    db_session.add(offer)
    db_session.commit()
    return offer


def _info(discount_type: str, value: float | None = None, custom_price: float | None = None) -> OfferInfo:
    return OfferInfo(
        id=1, code="X", name=None, discount_type=discount_type, discount_value=value,
        custom_price=custom_price, valid_until=None, min_nights=None,
    )


class TestResolve:
    def test_empty_code(self, resolver: OfferResolver):
        assert resolver.resolve(None) is None
        assert resolver.resolve("  ") is None

    def test_code_is_case_insensitive(self, db_session: Session, resolver: OfferResolver):
        offer = _offer(db_session)
        assert resolver.resolve("summer20", now=NOW).id == offer.id

    def test_open_window(self, db_session: Session, resolver: OfferResolver):
        _offer(db_session, valid_from=None, valid_until=None)
        assert resolver.resolve("SUMMER20", now=NOW) is not None

    def test_inside_window(self, db_session: Session, resolver: OfferResolver):
        _offer(db_session, valid_from=NOW - timedelta(days=1), valid_until=NOW + timedelta(days=1))
        assert resolver.resolve("SUMMER20", now=NOW) is not None

    def test_window_bounds_inclusive(self, db_session: Session, resolver: OfferResolver):
        _offer(db_session, valid_from=NOW, valid_until=NOW)
        assert resolver.resolve("SUMMER20", now=NOW) is not None

    def test_not_started(self, db_session: Session, resolver: OfferResolver):
        _offer(db_session, valid_from=NOW + timedelta(hours=1))
        assert resolver.resolve("SUMMER20", now=NOW) is None

    def test_expired(self, db_session: Session, resolver: OfferResolver):
        _offer(db_session, valid_until=NOW - timedelta(seconds=1))
        assert resolver.resolve("SUMMER20", now=NOW) is None

    def test_inactive(self, db_session: Session, resolver: OfferResolver):
        _offer(db_session, active=False)
        assert resolver.resolve("SUMMER20", now=NOW) is None

    def test_duplicate_codes_lowest_id_wins(self, db_session: Session, resolver: OfferResolver, caplog):
        first = _offer(db_session)
        _offer(db_session, discount_value=50.0)
        with caplog.at_level(logging.WARNING, logger="litepages.modules.offers.resolver"):
            assert resolver.resolve("SUMMER20", now=NOW).id == first.id
        assert "share code" in caplog.text


class TestHasActiveOffers:
    def test_property_offer(self, db_session: Session, resolver: OfferResolver, sample_property: Property):
        _offer(db_session, property_id=sample_property.id)
        assert resolver.has_active_offers(db_session, sample_property.id, sample_property.account_id, now=NOW)

    def test_account_offer(self, db_session: Session, resolver: OfferResolver, sample_property: Property):
        _offer(db_session, account_id=sample_property.account_id)
        assert resolver.has_active_offers(db_session, sample_property.id, sample_property.account_id, now=NOW)

    def test_hidden_from_website(self, db_session: Session, resolver: OfferResolver, sample_property: Property):
        _offer(db_session, property_id=sample_property.id, available_website=False)
        assert not resolver.has_active_offers(db_session, sample_property.id, sample_property.account_id, now=NOW)

    def test_other_property(self, db_session: Session, resolver: OfferResolver, sample_property: Property):
        other = Property(name="Elsewhere")
        db_session.add(other)
        db_session.commit()
        _offer(db_session, property_id=other.id)
        assert not resolver.has_active_offers(db_session, sample_property.id, sample_property.account_id, now=NOW)

    def test_expired_offer(self, db_session: Session, resolver: OfferResolver, sample_property: Property):
        _offer(db_session, property_id=sample_property.id, valid_until=NOW - timedelta(days=1))
        assert not resolver.has_active_offers(db_session, sample_property.id, sample_property.account_id, now=NOW)


class TestEligible:
    def test_weekday_numbering_starts_sunday(self):
        assert weekday_number(FRIDAY) == 5
        assert weekday_number(SUNDAY) == 0

    def test_lists_website_offers_by_priority(
        self, db_session: Session, resolver: OfferResolver, sample_property: Property,
    ):
        low = _offer(db_session, code="LOW", property_id=sample_property.id, priority=0, discount_value=30.0)
        high = _offer(db_session, code="HIGH", property_id=sample_property.id, priority=5, discount_value=10.0)
        _offer(db_session, code="HIDDEN", property_id=sample_property.id, available_website=False)
        _offer(db_session, code="OLD", property_id=sample_property.id, valid_until=NOW - timedelta(days=1))
        offers = resolver.eligible(sample_property.id, now=NOW)
        assert [o.id for o in offers] == [high.id, low.id]

    def test_account_looked_up_from_property(
        self, db_session: Session, resolver: OfferResolver, sample_property: Property,
    ):
        offer = _offer(db_session, account_id=sample_property.account_id)
        assert [o.id for o in resolver.eligible(sample_property.id, now=NOW)] == [offer.id]

    def test_room_restricted_offers(
        self, db_session: Session, resolver: OfferResolver, sample_property: Property, sample_unit: BookableUnit,
    ):
        annex = BookableUnit(property_id=sample_property.id, name="Annex")
        db_session.add(annex)
        db_session.commit()
        anywhere = _offer(db_session, code="ANY", property_id=sample_property.id)
        villa = _offer(db_session, code="VILLA", property_id=sample_property.id, unit_id=sample_unit.id)
        _offer(db_session, code="ANNEX", property_id=sample_property.id, unit_id=annex.id)
        ids = {o.id for o in resolver.eligible(sample_property.id, unit_id=sample_unit.id, now=NOW)}
        assert ids == {anywhere.id, villa.id}

    def test_stay_filters(self, db_session: Session, resolver: OfferResolver, sample_property: Property):
        fits = _offer(db_session, code="FITS", property_id=sample_property.id, min_nights=2, max_nights=7)
        _offer(db_session, code="LONG", property_id=sample_property.id, min_nights=3)
        _offer(db_session, code="SHORT", property_id=sample_property.id, max_nights=1)
        offers = resolver.eligible(sample_property.id, checkin=FRIDAY, checkout=SUNDAY, today=TODAY, now=NOW)
        assert [o.id for o in offers] == [fits.id]

    def test_dates_required_for_filtering(self, db_session: Session, resolver: OfferResolver, sample_property: Property):
        _offer(db_session, property_id=sample_property.id, min_nights=30)
        assert len(resolver.eligible(sample_property.id, checkin=FRIDAY, now=NOW)) == 1


class TestStayQualifies:
    def _qualifies(self, **rules) -> bool:
        return stay_qualifies(Offer(code="X", **rules), FRIDAY, SUNDAY, TODAY)

    def test_no_rules(self):
        assert self._qualifies()

    def test_zero_rules_ignored(self):
        assert self._qualifies(min_nights=0, max_nights=0, min_advance_days=0, max_advance_days=0)

    def test_nights(self):
        assert self._qualifies(min_nights=2, max_nights=2)
        assert not self._qualifies(min_nights=3)
        assert not self._qualifies(max_nights=1)

    def test_advance_days(self):
        # FRIDAY is 32 days after TODAY
        assert self._qualifies(min_advance_days=32, max_advance_days=32)
        assert not self._qualifies(min_advance_days=60)
        assert not self._qualifies(max_advance_days=14)

    def test_checkin_weekdays(self):
        assert self._qualifies(allowed_checkin_days="5,6")
        assert self._qualifies(allowed_checkin_days=" 5 , 6 ")
        assert not self._qualifies(allowed_checkin_days="1,2,3")

    def test_checkout_weekdays(self):
        assert self._qualifies(allowed_checkout_days="0")
        assert not self._qualifies(allowed_checkout_days="6")

    def test_blank_weekday_rule_passes(self):
        assert self._qualifies(allowed_checkin_days="", allowed_checkout_days="  ")


class TestDiscounts:
    def test_percentage(self):
        assert apply_discount(150.0, _info("percentage", 20)) == 120
        assert apply_discount(99.0, _info("percentage", 15)) == 84
        assert apply_discount(101.0, _info("percentage", 50)) == 51

    def test_fixed(self):
        assert apply_discount(150.0, _info("fixed", 25)) == 125.0
        assert apply_discount(20.0, _info("fixed", 25)) == 0.0

    def test_custom_price(self):
        assert apply_discount(150.0, _info("custom", custom_price=99.0)) == 99.0
        assert apply_discount(None, _info("custom", custom_price=99.0)) == 99.0

    def test_no_offer_or_price(self):
        assert apply_discount(150.0, None) == 150.0
        assert apply_discount(None, _info("percentage", 20)) is None

    def test_labels(self):
        assert discount_label(_info("percentage", 20)) == "20% OFF"
        assert discount_label(_info("percentage", 12.5)) == "12.5% OFF"
        assert discount_label(_info("fixed", 25), "€") == "€25 OFF"
        assert discount_label(_info("custom", custom_price=99.0)) == "SPECIAL PRICE"
