"""Векторная геометрия: расстояния, углы, привязка к шагу, ориентация."""

from scene_measure.geometry.vector import (
    Point3,
    angle_degrees,
    as_point,
    distance,
    look_at_rotation,
    midpoint,
    normalize,
    perpendicular,
    rotation_z,
    snap_to_increment,
)

__all__ = [
    "Point3",
    "angle_degrees",
    "as_point",
    "distance",
    "look_at_rotation",
    "midpoint",
    "normalize",
    "perpendicular",
    "rotation_z",
    "snap_to_increment",
]
