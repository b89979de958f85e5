"""
Cable management accessories.
"""

from ..model_base import ModelBase
from ..primitives import create_box, create_cylinder, create_mounting_hole, subtract, union


class CableClip(ModelBase):
    """Square base with an upright tab the cable passes through."""

    default_name = 'cable-clip'

    def get_default_params(self):
        return {
            'cable_diameter': 6,        # mm
            'clip_thickness': 2,        # mm
            'clip_height': 10,          # mm
            'base_width': 15,           # mm
            'base_thickness': 3,        # mm
            'screw_hole_diameter': 3,   # mm
        }

    def generate(self):
        p = self.params
        cable_d = p['cable_diameter']
        clip_t = p['clip_thickness']
        clip_h = p['clip_height']
        base_w = p['base_width']
        base_t = p['base_thickness']

        base = create_box(base_w, base_w, base_t)

        # Tab sits on top of the base
        tab_z = base_t / 2 + clip_h / 2
        clip_width = cable_d + 2 * clip_t
        tab = create_box(clip_width, clip_t, clip_h, center=(0, 0, tab_z))

        # Channel runs along Y through the tab
        channel = create_cylinder(
            cable_d / 2,
            clip_t + 2,
            center=(0, 0, tab_z),
            rotation=(90, 0, 0),
        )

        # Keep the screw hole clear of the tab
        screw_hole = create_mounting_hole(
            p['screw_hole_diameter'], base_t + 2, (0, base_w / 4, 0)
        )

        return subtract(union(base, tab), channel, screw_hole)
