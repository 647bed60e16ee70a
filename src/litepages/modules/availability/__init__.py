from litepages.modules.availability.calendar import AvailabilityCalendar, StayQuote, display_price
from litepages.modules.availability.taxes import TaxBreakdown, TaxLine

__all__ = ["AvailabilityCalendar", "StayQuote", "TaxBreakdown", "TaxLine", "display_price"]
