"""
Electronics enclosure with side ventilation and floor mounting holes.
"""

import math

from ..model_base import ModelBase
from ..primitives import create_box, create_hole_pattern, create_mounting_hole, rotate, subtract, translate


MOUNT_HOLE_DIAMETER = 3  # mm
MOUNT_HOLE_INSET = 5     # mm


class Enclosure(ModelBase):
    default_name = 'enclosure'

    def get_default_params(self):
        return {
            'width': 100,            # mm, internal
            'depth': 80,             # mm, internal
            'height': 40,            # mm, internal
            'wall_thickness': 2,     # mm
            'vent_hole_size': 3,     # mm
            'vent_hole_spacing': 6,  # mm
            'mounting_holes': True,
            'corner_radius': 3,      # mm
        }

    def generate(self):
        p = self.params
        width, depth, height = p['width'], p['depth'], p['height']
        wall = p['wall_thickness']
        corner = p['corner_radius']

        outer_width = width + 2 * wall
        outer_depth = depth + 2 * wall
        outer_height = height + wall

        shell = create_box(outer_width, outer_depth, outer_height, round_radius=corner)
        # Cavity overshoots the top so the box is open
        cavity = create_box(width, depth, height + 1, center=(0, 0, wall), round_radius=corner * 0.7)
        enclosure = subtract(shell, cavity)

        vent_count = int(math.floor(depth / p['vent_hole_spacing']))
        if vent_count > 0:
            pattern = create_hole_pattern(
                p['vent_hole_size'], wall + 2, p['vent_hole_spacing'], vent_count, 'y'
            )
            # Turn the vertical holes to point along X, one row per side wall
            sideways = rotate((0, 90, 0), pattern)
            wall_x = width / 2 + wall / 2
            enclosure = subtract(
                enclosure,
                translate((-wall_x, 0, 0), sideways),
                translate((wall_x, 0, 0), sideways),
            )

        if p['mounting_holes']:
            floor_z = -outer_height / 2 + wall / 2
            dx = width / 2 - MOUNT_HOLE_INSET
            dy = depth / 2 - MOUNT_HOLE_INSET
            holes = [
                create_mounting_hole(MOUNT_HOLE_DIAMETER, wall + 2, (sx * dx, sy * dy, floor_z))
                for sx in (-1, 1)
                for sy in (-1, 1)
            ]
            enclosure = subtract(enclosure, *holes)

        return enclosure
