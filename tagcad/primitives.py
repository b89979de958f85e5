"""
3D primitives using build123d.

Thin helpers for the shapes and boolean operations the models compose.
All shapes are centred on their position unless stated otherwise.
Lengths are in mm, rotations in degrees.
"""

from typing import Optional, Sequence, Tuple

from build123d import (
    Box,
    BuildPart,
    Cylinder,
    Part,
    Pos,
    Rot,
    Sphere,
    fillet,
)


Vector3 = Tuple[float, float, float]

# Fillet radius must stay below half the smallest box dimension
MAX_ROUND_RATIO = 0.45


def create_box(
    width: float,
    depth: float,
    height: float,
    center: Vector3 = (0, 0, 0),
    round_radius: float = 0.0,
) -> Part:
    """
    Create a box, optionally with all edges rounded.

    The rounding radius is capped so that the fillet stays valid.
    """
    if round_radius and round_radius > 0:
        radius = min(round_radius, MAX_ROUND_RATIO * min(width, depth, height))
        with BuildPart() as builder:
            Box(width, depth, height)
            fillet(builder.edges(), radius=radius)
        box = builder.part
    else:
        box = Box(width, depth, height)
    return Pos(*center) * box


def create_cylinder(
    radius: float,
    height: float,
    center: Vector3 = (0, 0, 0),
    rotation: Vector3 = (0, 0, 0),
) -> Part:
    """Create a cylinder along Z, rotated then moved to center."""
    return Pos(*center) * Rot(*rotation) * Cylinder(radius, height)


def create_sphere(radius: float, center: Vector3 = (0, 0, 0)) -> Part:
    return Pos(*center) * Sphere(radius)


def create_mounting_hole(diameter: float, depth: float, position: Vector3 = (0, 0, 0)) -> Part:
    """Create a vertical hole tool (cylinder to subtract)."""
    return create_cylinder(diameter / 2, depth, center=position)


def create_hole_pattern(
    diameter: float,
    depth: float,
    spacing: float,
    count: int,
    axis: str = 'x',
) -> Optional[Part]:
    """
    Create a row of holes centred on the origin along the given axis.

    Returns None when count is zero.
    """
    if axis not in ('x', 'y', 'z'):
        raise ValueError(f"axis must be 'x', 'y' or 'z', got {axis!r}")

    offset = -((count - 1) * spacing) / 2
    holes = []
    for i in range(int(count)):
        d = offset + i * spacing
        position = {
            'x': (d, 0, 0),
            'y': (0, d, 0),
            'z': (0, 0, d),
        }[axis]
        holes.append(create_mounting_hole(diameter, depth, position))

    return union(*holes) if holes else None


def union(*parts: Optional[Part]) -> Optional[Part]:
    """Fuse parts; None entries are ignored."""
    result = None
    for part in parts:
        if part is None:
            continue
        result = part if result is None else result + part
    return result


def subtract(base: Part, *tools: Optional[Part]) -> Part:
    """Cut each tool from base; None tools are ignored."""
    result = base
    for tool in tools:
        if tool is not None:
            result = result - tool
    return result


def intersect(a: Part, b: Part) -> Part:
    return a & b


def translate(offset: Sequence[float], part: Part) -> Part:
    return Pos(*offset) * part


def rotate(angles: Sequence[float], part: Part) -> Part:
    return Rot(*angles) * part


def inches_to_mm(inches: float) -> float:
    return inches * 25.4
