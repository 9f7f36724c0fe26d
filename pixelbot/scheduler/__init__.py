"""Scheduled autonomous activity per session."""

from pixelbot.scheduler.controller import ScheduledActivityController, TimerHandle
from pixelbot.scheduler.playlist import PlaylistState, PlayOrder

__all__ = ["PlayOrder", "PlaylistState", "ScheduledActivityController", "TimerHandle"]
