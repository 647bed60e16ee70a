from litepages.modules.content.aggregator import (
    AmenityGroup,
    ContentAggregator,
    LitePageData,
    primary_unit_for,
)

__all__ = ["AmenityGroup", "ContentAggregator", "LitePageData", "primary_unit_for"]
