"""Fetching and validating remote content destined for devices."""

from pixelbot.content.fetch import ContentFetcher
from pixelbot.content.validation import ContentValidator, ValidatedContent, validate

__all__ = ["ContentFetcher", "ContentValidator", "ValidatedContent", "validate"]
