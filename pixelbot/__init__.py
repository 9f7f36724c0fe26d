"""
pixelbot - chat bots that drive small pixel-display devices.
"""

__version__ = "0.1.0"
__logo__ = "🟩"
