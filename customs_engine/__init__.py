"""Customs classification, declaration matching and SKU synthesis engine."""

__version__ = "1.0.0"
