"""
Entry point for running pixelbot as a module: python -m pixelbot
"""

from pixelbot.cli.commands import app

if __name__ == "__main__":
    app()
