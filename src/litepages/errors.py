"""Error taxonomy shared by the components and mapped to responses in the app."""

from __future__ import annotations


class LiteError(Exception):
    """Base class for every error this service raises on purpose."""


class NotFound(LiteError):
    """Unknown or inactive slug, or a missing record."""

    def __init__(self, what: str) -> None:
        super().__init__(f"{what} not found")
        self.what = what


class SlugTaken(LiteError):
    def __init__(self, slug: str) -> None:
        super().__init__("Slug taken")
        self.slug = slug


class AggregationError(LiteError):
    """A read feeding a lite page failed; the page must not be rendered partially."""


class RenderError(LiteError):
    """Image (QR) generation failed."""


class QuoteError(LiteError):
    """A stay cannot be priced for the requested dates."""
