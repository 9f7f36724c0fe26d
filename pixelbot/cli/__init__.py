"""Command-line interface for pixelbot."""
