"""Database models."""

from litepages.models.account import Account
from litepages.models.availability import AvailabilityEntry
from litepages.models.lite import LiteEntry
from litepages.models.offer import Offer
from litepages.models.property import Amenity, Property, PropertyImage
from litepages.models.review import Review
from litepages.models.tax import Tax
from litepages.models.unit import BookableUnit, UnitAmenity, UnitImage

__all__ = [
    "Account",
    "Amenity",
    "AvailabilityEntry",
    "BookableUnit",
    "LiteEntry",
    "Offer",
    "Property",
    "PropertyImage",
    "Review",
    "Tax",
    "UnitAmenity",
    "UnitImage",
]
