"""Playback hints for alert sounds shown by the dashboard."""

from __future__ import annotations


def alert_sound_volume(priority: int) -> float:
    """Return the suggested volume for an alert of the given ``priority``."""

    if priority >= 10:
        return 0.8
    if priority >= 5:
        return 0.6
    return 0.4


__all__ = ["alert_sound_volume"]
