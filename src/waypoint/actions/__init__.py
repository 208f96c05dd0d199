"""Action handler mixins for WaypointApp."""

from .navigation_actions import NavigationActionsMixin

__all__ = [
    "NavigationActionsMixin",
]
