"""Shared fixtures for the floor-plan geometry tests."""

import pytest

from floorplan_geometry.config import EngineConfig
from floorplan_geometry.models.geometry import Point2D


def rect(x0, y0, x1, y1):
    """CCW rectangle contour."""
    return [Point2D(x0, y0), Point2D(x1, y0), Point2D(x1, y1), Point2D(x0, y1)]


def rounded(points, digits=6):
    """Point set with coordinates rounded, for order-free comparisons."""
    return {(round(p.x, digits) + 0.0, round(p.y, digits) + 0.0) for p in points}


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def l_shape():
    return [
        Point2D(0, 0), Point2D(6, 0), Point2D(6, 2),
        Point2D(2, 2), Point2D(2, 6), Point2D(0, 6),
    ]
