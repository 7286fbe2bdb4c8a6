"""Route geometry."""

from route_notams.route.great_circle import GreatCircleRouter

__all__ = ['GreatCircleRouter']
