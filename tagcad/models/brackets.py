"""
Mounting bracket: a flat plate with a row of screw holes.
"""

from ..model_base import ModelBase
from ..primitives import create_box, create_mounting_hole, subtract


class MountingBracket(ModelBase):
    default_name = 'mounting-bracket'

    def get_default_params(self):
        return {
            'width': 50,         # mm
            'height': 30,        # mm
            'thickness': 3,      # mm
            'hole_count': 2,
            'hole_diameter': 5,  # mm
            'hole_spacing': 30,  # mm
        }

    def generate(self):
        p = self.params
        thickness = p['thickness']

        base = create_box(p['width'], p['height'], thickness, round_radius=1)

        count = int(p['hole_count'])
        offset = -((count - 1) * p['hole_spacing']) / 2
        holes = [
            create_mounting_hole(p['hole_diameter'], thickness + 2, (offset + i * p['hole_spacing'], 0, 0))
            for i in range(count)
        ]

        return subtract(base, *holes)
