from litepages.modules.offers.resolver import (
    OfferInfo,
    OfferResolver,
    apply_discount,
    discount_label,
    stay_qualifies,
)

__all__ = ["OfferInfo", "OfferResolver", "apply_discount", "discount_label", "stay_qualifies"]
