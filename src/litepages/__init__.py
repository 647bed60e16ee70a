"""LitePages: server-rendered landing pages, promo cards and QR codes for properties."""

__version__ = "0.1.0"
