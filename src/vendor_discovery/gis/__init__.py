"""
Геометрия карты для выдачи вендоров.

Публичное API:
- locator.center
- locator.located
- locator.bounds
- locator.marker_style
- locator.markers
"""

from .locator import center, located, bounds, marker_style, markers, Marker, DEFAULT_CENTER
