"""Gathers everything a lite page shows into one immutable snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from litepages.config import lite_settings, local_today
from litepages.database import Database
from litepages.errors import AggregationError
from litepages.models.account import Account
from litepages.models.lite import LiteEntry
from litepages.models.property import Amenity, Property, PropertyImage
from litepages.models.review import Review
from litepages.models.unit import BookableUnit, UnitAmenity, UnitImage
from litepages.modules.availability.calendar import AvailabilityCalendar, display_price
from litepages.modules.offers.resolver import OfferInfo, OfferResolver
from litepages.text import localized_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiteInfo:
    id: int
    slug: str
    custom_title: str | None
    custom_tagline: str | None
    theme: str
    accent_color: str
    show_pricing: bool
    show_availability: bool
    show_reviews: bool
    show_qr: bool


@dataclass(frozen=True)
class PropertyInfo:
    id: int
    name: str
    short_description: str | None
    full_description: str | None
    city: str | None
    country: str | None
    latitude: float | None
    longitude: float | None
    currency: str
    check_in_time: str | None
    check_out_time: str | None
    house_rules: str | None
    cancellation_policy: str | None
    average_rating: float | None
    pets_allowed: bool
    children_allowed: bool
    smoking_allowed: bool
    events_allowed: bool
    account_name: str | None


@dataclass(frozen=True)
class UnitInfo:
    id: int
    name: str
    display_name: str
    short_description: str | None
    full_description: str | None
    unit_type: str | None
    bedrooms: int | None
    bathrooms: float | None
    max_guests: int | None


@dataclass(frozen=True)
class ImageInfo:
    url: str
    caption: str | None = None
    is_primary: bool = False


@dataclass(frozen=True)
class AmenityItem:
    name: str
    icon: str | None


@dataclass(frozen=True)
class AmenityGroup:
    category: str
    items: tuple[AmenityItem, ...]


@dataclass(frozen=True)
class ReviewInfo:
    guest_name: str | None
    rating: int | None
    comment: str | None
    review_date: date | None


@dataclass(frozen=True)
class LitePageData:
    lite: LiteInfo
    prop: PropertyInfo
    unit: UnitInfo | None
    images: tuple[ImageInfo, ...] = ()
    amenities: tuple[AmenityGroup, ...] = ()
    reviews: tuple[ReviewInfo, ...] = ()
    today_price: float | None = None
    total_bedrooms: int = 0
    max_guests: int | None = None
    offer: OfferInfo | None = None
    has_offers: bool = False
    today: date = field(default_factory=date.today)

    @property
    def average_rating(self) -> float | None:
        """Stored property average, else the mean of the fetched reviews."""
        if self.prop.average_rating is not None:
            return self.prop.average_rating
        ratings = [r.rating for r in self.reviews if r.rating is not None]
        if not ratings:
            return None
        return sum(ratings) / len(ratings)

    @property
    def hero_image(self) -> ImageInfo | None:
        return self.images[0] if self.images else None


def primary_unit_for(session: Session, property_id: int) -> BookableUnit | None:
    """The unit a property-level lite page represents: first non-hidden unit by creation order."""
    return session.scalars(
        select(BookableUnit)
        .where(BookableUnit.property_id == property_id, BookableUnit.hidden.is_not(True))
        .order_by(BookableUnit.created_at, BookableUnit.id)
    ).first()


def group_amenities(rows: list[tuple[str, str | None, str | None]]) -> tuple[AmenityGroup, ...]:
    """Group ``(name, icon, category)`` rows by category in first-seen order."""
    groups: dict[str, list[AmenityItem]] = {}
    for name, icon, category in rows:
        groups.setdefault(category or "General", []).append(
            AmenityItem(name=localized_text(name), icon=icon)
        )
    return tuple(AmenityGroup(category=cat, items=tuple(items)) for cat, items in groups.items())


class ContentAggregator:
    """Runs the independent reads behind a lite page and snapshots the results."""

    def __init__(
        self,
        database: Database,
        calendar: AvailabilityCalendar,
        offers: OfferResolver,
    ) -> None:
        self._db = database
        self._calendar = calendar
        self._offers = offers
        cfg = lite_settings()
        self._max_images = cfg.get("max_images", 20)
        self._max_reviews = cfg.get("max_reviews", 10)

    def aggregate(
        self,
        lite: LiteEntry,
        offer_code: str | None = None,
        today: date | None = None,
    ) -> LitePageData:
        """Build the page snapshot for a resolved lite entry.

        Raises AggregationError if any read fails; nothing partial is returned.
        """
        today = today or local_today()
        session = self._db.session()
        try:
            prop = session.get(Property, lite.property_id)
            if prop is None:
                raise AggregationError(f"Property {lite.property_id} missing for lite {lite.slug}")
            account_id = lite.account_id or prop.account_id
            account = session.get(Account, account_id) if account_id else None

            unit = session.get(BookableUnit, lite.unit_id) if lite.unit_id else None
            if unit is None:
                unit = primary_unit_for(session, prop.id)

            images = self._images(session, prop.id, unit.id if unit else None)
            amenities = self._amenities(session, unit.id) if unit else ()
            reviews = self._reviews(session, prop.id)
            today_entry = self._calendar.price_for(session, unit.id, today) if unit else None
            total_bedrooms, max_guests = self._portfolio(session, prop.id)
            offer = self._offers.resolve_in(session, offer_code)
            has_offers = self._offers.has_active_offers(session, prop.id, prop.account_id)

            return LitePageData(
                lite=_lite_info(lite),
                prop=_property_info(prop, account),
                unit=_unit_info(unit) if unit else None,
                images=images,
                amenities=amenities,
                reviews=reviews,
                today_price=display_price(today_entry),
                total_bedrooms=total_bedrooms,
                max_guests=max_guests,
                offer=OfferInfo.from_model(offer) if offer else None,
                has_offers=has_offers,
                today=today,
            )
        except SQLAlchemyError as exc:
            logger.exception("Aggregation failed for lite %s", lite.slug)
            raise AggregationError(f"Could not load lite {lite.slug}") from exc
        finally:
            session.close()

    def _images(self, session: Session, property_id: int, unit_id: int | None) -> tuple[ImageInfo, ...]:
        """Unit images, falling back to property images when the unit has none."""
        rows: list = []
        if unit_id is not None:
            rows = list(session.scalars(
                select(UnitImage)
                .where(UnitImage.unit_id == unit_id, UnitImage.active.is_(True))
                .order_by(UnitImage.is_primary.desc(), UnitImage.display_order, UnitImage.id)
                .limit(self._max_images)
            ))
        if not rows:
            rows = list(session.scalars(
                select(PropertyImage)
                .where(PropertyImage.property_id == property_id, PropertyImage.active.is_(True))
                .order_by(PropertyImage.is_primary.desc(), PropertyImage.display_order, PropertyImage.id)
                .limit(self._max_images)
            ))
        return tuple(ImageInfo(url=r.url, caption=r.caption, is_primary=bool(r.is_primary)) for r in rows)

    def _amenities(self, session: Session, unit_id: int) -> tuple[AmenityGroup, ...]:
        rows = session.execute(
            select(Amenity.name, Amenity.icon, Amenity.category)
            .join(UnitAmenity, UnitAmenity.amenity_id == Amenity.id)
            .where(UnitAmenity.unit_id == unit_id)
            .order_by(UnitAmenity.id)
        ).all()
        return group_amenities([tuple(row) for row in rows])

    def _reviews(self, session: Session, property_id: int) -> tuple[ReviewInfo, ...]:
        rows = session.scalars(
            select(Review)
            .where(Review.property_id == property_id, Review.is_approved.is_(True))
            .order_by(Review.review_date.desc(), Review.id.desc())
            .limit(self._max_reviews)
        )
        return tuple(
            ReviewInfo(
                guest_name=r.guest_name,
                rating=r.rating,
                comment=r.comment,
                review_date=r.review_date,
            )
            for r in rows
        )

    def _portfolio(self, session: Session, property_id: int) -> tuple[int, int | None]:
        """Total bedrooms and largest guest capacity across the property's visible units."""
        bedrooms, guests = session.execute(
            select(func.coalesce(func.sum(BookableUnit.num_bedrooms), 0), func.max(BookableUnit.max_guests))
            .where(BookableUnit.property_id == property_id, BookableUnit.hidden.is_not(True))
        ).one()
        return int(bedrooms or 0), guests


def _lite_info(lite: LiteEntry) -> LiteInfo:
    return LiteInfo(
        id=lite.id,
        slug=lite.slug,
        custom_title=lite.custom_title,
        custom_tagline=lite.custom_tagline,
        theme=lite.theme,
        accent_color=lite.accent_color,
        show_pricing=lite.show_pricing is not False,
        show_availability=lite.show_availability is not False,
        show_reviews=lite.show_reviews is not False,
        show_qr=lite.show_qr is not False,
    )


def _property_info(prop: Property, account: Account | None) -> PropertyInfo:
    return PropertyInfo(
        id=prop.id,
        name=prop.name,
        short_description=prop.short_description,
        full_description=prop.full_description,
        city=prop.city,
        country=prop.country,
        latitude=prop.latitude,
        longitude=prop.longitude,
        currency=prop.currency or "USD",
        check_in_time=prop.check_in_time,
        check_out_time=prop.check_out_time,
        house_rules=prop.house_rules,
        cancellation_policy=prop.cancellation_policy,
        average_rating=prop.average_rating,
        pets_allowed=bool(prop.pets_allowed),
        children_allowed=bool(prop.children_allowed),
        smoking_allowed=bool(prop.smoking_allowed),
        events_allowed=bool(prop.events_allowed),
        account_name=account.display_name if account else None,
    )


def _unit_info(unit: BookableUnit) -> UnitInfo:
    return UnitInfo(
        id=unit.id,
        name=unit.name,
        display_name=localized_text(unit.display_name),
        short_description=unit.short_description,
        full_description=unit.full_description,
        unit_type=unit.unit_type,
        bedrooms=unit.num_bedrooms,
        bathrooms=unit.num_bathrooms,
        max_guests=unit.max_guests,
    )
