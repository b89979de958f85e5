"""
Token library: round, hex and square tokens for tabletop games.

Supports batch generation of standard sizes and presets.
"""

from typing import Dict, List
import math

from build123d import (
    Axis,
    Box,
    BuildPart,
    BuildSketch,
    Cylinder,
    GeomType,
    Pos,
    RegularPolygon,
    Torus,
    extrude,
    fillet,
)

from ..model_base import ModelBase
from ..primitives import create_cylinder, create_mounting_hole, subtract, union


# Standard token sizes (mm)
TOKEN_SIZES: Dict[str, Dict[str, float]] = {
    'micro': {'diameter': 15, 'height': 2},
    'tiny': {'diameter': 20, 'height': 2},
    'small': {'diameter': 25, 'height': 3},
    'medium': {'diameter': 32, 'height': 3},
    'large': {'diameter': 40, 'height': 4},
    'xlarge': {'diameter': 50, 'height': 4},
}

# Common presets for tabletop gaming
TOKEN_PRESETS: Dict[str, Dict[str, float]] = {
    'dnd-small': {'diameter': 20, 'height': 3},
    'dnd-medium': {'diameter': 25, 'height': 3},
    'dnd-large': {'diameter': 50, 'height': 4},
    'dnd-huge': {'diameter': 75, 'height': 5},
    'dnd-gargantuan': {'diameter': 100, 'height': 6},
    'wh-25mm': {'diameter': 25, 'height': 3},
    'wh-32mm': {'diameter': 32, 'height': 3},
    'wh-40mm': {'diameter': 40, 'height': 4},
    'wh-50mm': {'diameter': 50, 'height': 4},
    'wh-60mm': {'diameter': 60, 'height': 5},
    'poker-chip': {'diameter': 39, 'height': 3.3},
    'counter-small': {'diameter': 16, 'height': 2},
    'counter-medium': {'diameter': 22, 'height': 2.5},
}

# Hex sizes are flat-to-flat
HEX_SIZES: Dict[str, Dict[str, float]] = {
    **TOKEN_SIZES,
    'catan': {'diameter': 72, 'height': 3},
    'battletech': {'diameter': 32, 'height': 3},
    'hex-1inch': {'diameter': 25.4, 'height': 3},
    'hex-1.5inch': {'diameter': 38.1, 'height': 3},
}

SQUARE_SIZES: Dict[str, Dict[str, float]] = {
    'micro': {'size': 15, 'height': 2},
    'tiny': {'size': 20, 'height': 2},
    'small': {'size': 25, 'height': 3},
    'medium': {'size': 32, 'height': 3},
    'large': {'size': 40, 'height': 4},
    'xlarge': {'size': 50, 'height': 4},
    'chess-small': {'size': 25, 'height': 5},
    'chess-large': {'size': 32, 'height': 6},
    'tile-1inch': {'size': 25.4, 'height': 3},
    'tile-2inch': {'size': 50.8, 'height': 4},
}


class TokenBase(ModelBase):
    """
    Shared token behaviour: optional raised lip and hollow underside.

    Subclasses implement generate_base_shape().
    """

    default_name = 'token'

    def get_default_params(self):
        return {
            'diameter': 25,      # mm
            'height': 3,         # mm
            'bevel': 0.5,        # mm, edge rounding
            'lip_height': 0,     # mm, 0 disables the lip
            'lip_width': 1,      # mm
            'hollow': False,
            'hollow_wall': 1.5,  # mm
        }

    def generate_base_shape(self):
        raise NotImplementedError(f"{type(self).__name__}.generate_base_shape() must be implemented by subclass")

    def add_lip(self, base):
        """Raised rim around the top face (round outline)."""
        p = self.params
        lip_height = p.get('lip_height') or 0
        diameter = p.get('diameter')
        if lip_height <= 0 or not diameter:
            return base

        z = p['height'] / 2 + lip_height / 2
        rim = create_cylinder(diameter / 2, lip_height, center=(0, 0, z))
        inner = create_cylinder(diameter / 2 - p['lip_width'], lip_height + 0.1, center=(0, 0, z))
        return union(base, subtract(rim, inner))

    def make_hollow(self, base):
        """Cut a cavity from the underside, leaving hollow_wall on top and sides."""
        p = self.params
        diameter = p.get('diameter')
        if not p.get('hollow') or not diameter:
            return base

        wall = p['hollow_wall']
        cavity_height = p['height'] - wall
        cavity = create_cylinder(
            diameter / 2 - wall,
            cavity_height + 0.1,
            center=(0, 0, -p['height'] / 2 + cavity_height / 2 - 0.05),
        )
        return subtract(base, cavity)

    def generate(self):
        token = self.generate_base_shape()
        token = self.add_lip(token)
        token = self.make_hollow(token)
        return token


class RoundToken(TokenBase):
    """Classic circular token/base for miniatures and board games."""

    default_name = 'round-token'

    def get_default_params(self):
        return {
            **super().get_default_params(),
            'diameter': 25,
            'height': 3,
            'groove_rings': 0,     # decorative concentric grooves
            'groove_depth': 0.3,
            'groove_width': 0.5,
        }

    def generate_base_shape(self):
        p = self.params
        radius = p['diameter'] / 2
        height = p['height']
        bevel = p.get('bevel') or 0

        with BuildPart() as builder:
            Cylinder(radius, height)
            if bevel > 0:
                fillet(
                    builder.edges().filter_by(GeomType.CIRCLE),
                    radius=min(bevel, 0.45 * height),
                )
        token = builder.part

        if p.get('groove_rings', 0) > 0:
            token = self.add_grooves(token)
        return token

    def add_grooves(self, token):
        p = self.params
        radius = p['diameter'] / 2
        rings = int(p['groove_rings'])
        groove_width = p['groove_width']
        spacing = (radius - groove_width * 2) / (rings + 1)

        # Sink the ring so only groove_depth of it cuts the top face
        z = p['height'] / 2 + groove_width / 2 - p['groove_depth']
        grooves = [
            Pos(0, 0, z) * Torus(spacing * i, groove_width / 2)
            for i in range(1, rings + 1)
        ]
        return subtract(token, *grooves)


class HexToken(TokenBase):
    """Hexagonal token for hex-based games."""

    default_name = 'hex-token'

    def get_default_params(self):
        return {
            **super().get_default_params(),
            'diameter': 32,         # flat-to-flat
            'height': 3,
            'flat_top': True,
            'center_hole': False,
            'hole_diameter': 3,
            'number_slot': False,   # recess for a number tile
            'slot_diameter': 20,
            'slot_depth': 1,
        }

    def circumradius(self) -> float:
        """Corner radius derived from the flat-to-flat diameter."""
        return self.params['diameter'] / math.sqrt(3)

    def generate_base_shape(self):
        p = self.params
        height = p['height']
        rotation = 0 if p['flat_top'] else 30

        with BuildPart() as builder:
            with BuildSketch():
                RegularPolygon(self.circumradius(), 6, rotation=rotation)
            extrude(amount=height)
        token = Pos(0, 0, -height / 2) * builder.part

        if p['center_hole']:
            token = subtract(token, create_mounting_hole(p['hole_diameter'], height + 0.2))

        if p['number_slot']:
            depth = p['slot_depth']
            slot = create_cylinder(
                p['slot_diameter'] / 2,
                depth + 0.1,
                center=(0, 0, height / 2 - depth / 2 + 0.05),
            )
            token = subtract(token, slot)

        return token

    def add_lip(self, base):
        # Round lip does not fit a hex outline
        return base

    def make_hollow(self, base):
        return base


class SquareToken(TokenBase):
    """Square or rectangular token with rounded corners."""

    default_name = 'square-token'

    def get_default_params(self):
        params = {
            **super().get_default_params(),
            'size': 25,            # side length
            'width': 0,            # 0 means use size
            'depth': 0,            # 0 means use size
            'height': 3,
            'corner_radius': 2,
            'center_hole': False,
            'hole_diameter': 3,
        }
        del params['diameter']
        return params

    def generate_base_shape(self):
        p = self.params
        width = p.get('width') or p['size']
        depth = p.get('depth') or p['size']
        height = p['height']
        corner = min(p.get('corner_radius') or 0, 0.45 * min(width, depth))

        with BuildPart() as builder:
            Box(width, depth, height)
            if corner > 0:
                fillet(builder.edges().filter_by(Axis.Z), radius=corner)
        token = builder.part

        if p['center_hole']:
            token = subtract(token, create_mounting_hole(p['hole_diameter'], height + 0.2))
        return token


TOKEN_TYPES = {
    'round': (RoundToken, {**TOKEN_SIZES, **TOKEN_PRESETS}),
    'hex': (HexToken, HEX_SIZES),
    'square': (SquareToken, SQUARE_SIZES),
}

BATCH_CONFIGS: Dict[str, List[Dict]] = {
    'gaming': [
        {'type': 'round', 'sizes': ['small', 'medium', 'large']},
        {'type': 'square', 'sizes': ['small', 'medium']},
        {'type': 'hex', 'sizes': ['medium', 'large']},
    ],
    'dnd': [
        {'type': 'round', 'sizes': ['dnd-small', 'dnd-medium', 'dnd-large', 'dnd-huge']},
    ],
    'warhammer': [
        {'type': 'round', 'sizes': ['wh-25mm', 'wh-32mm', 'wh-40mm', 'wh-50mm', 'wh-60mm']},
    ],
    'boardgame': [
        {'type': 'round', 'sizes': ['poker-chip', 'counter-small', 'counter-medium']},
        {'type': 'square', 'sizes': ['tile-1inch', 'tile-2inch']},
        {'type': 'hex', 'sizes': ['catan']},
    ],
    'minimal': [
        {'type': 'round', 'sizes': ['small', 'medium']},
    ],
}


def create_token(token_type: str, size: str = 'medium', registry=None, **params) -> TokenBase:
    """
    Create a token by type and size name.

    Unknown size names fall back to the type's 'medium' size.
    """
    if token_type not in TOKEN_TYPES:
        raise ValueError(
            f"Unknown token type: {token_type}. Available: {', '.join(TOKEN_TYPES)}"
        )
    cls, sizes = TOKEN_TYPES[token_type]
    size_params = sizes.get(size, sizes['medium'])
    return cls(f"{token_type}-token-{size}", {**size_params, **params}, registry)


def list_available_tokens() -> List[Dict[str, str]]:
    return [
        {'type': token_type, 'size': size, 'name': f"{token_type}-token-{size}"}
        for token_type, (_, sizes) in TOKEN_TYPES.items()
        for size in sizes
    ]


def generate_batch(config_name: str, registry=None) -> List[Dict]:
    """Create and generate every token listed in a batch config."""
    config = BATCH_CONFIGS.get(config_name)
    if config is None:
        raise ValueError(
            f"Unknown batch config: {config_name}. Available: {', '.join(BATCH_CONFIGS)}"
        )

    tokens = []
    for entry in config:
        for size in entry['sizes']:
            token = create_token(entry['type'], size, registry)
            tokens.append({
                'type': entry['type'],
                'size': size,
                'name': token.name,
                'model': token,
                'geometry': token.generate(),
            })
    return tokens
