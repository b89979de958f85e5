"""
Model registry: every parametric model shipped with the package.
"""

from typing import Dict, List, Mapping, Optional, Type

from ..model_base import ModelBase
from ..tag_provider import TagRegistry
from .accessories import CableClip
from .brackets import MountingBracket
from .enclosures import Enclosure
from .tokens import (
    BATCH_CONFIGS,
    HEX_SIZES,
    SQUARE_SIZES,
    TOKEN_PRESETS,
    TOKEN_SIZES,
    HexToken,
    RoundToken,
    SquareToken,
    TokenBase,
    create_token,
    generate_batch,
    list_available_tokens,
)


MODEL_REGISTRY: Dict[str, Dict[str, Type[ModelBase]]] = {
    'brackets': {
        'mounting-bracket': MountingBracket,
    },
    'enclosures': {
        'enclosure': Enclosure,
    },
    'accessories': {
        'cable-clip': CableClip,
    },
    'tokens': {
        'round-token': RoundToken,
        'hex-token': HexToken,
        'square-token': SquareToken,
    },
}


def get_all_models() -> List[Dict]:
    """List {name, model_class, category} for every registered model."""
    return [
        {'name': name, 'model_class': model_class, 'category': category}
        for category, models in MODEL_REGISTRY.items()
        for name, model_class in models.items()
    ]


def get_model_class(model_id: str) -> Type[ModelBase]:
    for models in MODEL_REGISTRY.values():
        if model_id in models:
            return models[model_id]
    raise KeyError(f'Model "{model_id}" not found in registry')


def create_model(
    model_id: str,
    params: Optional[Mapping] = None,
    registry: Optional[TagRegistry] = None,
) -> ModelBase:
    """Instantiate a registered model by id."""
    return get_model_class(model_id)(model_id, params, registry)


__all__ = [
    'MODEL_REGISTRY',
    'get_all_models',
    'get_model_class',
    'create_model',
    'MountingBracket',
    'CableClip',
    'Enclosure',
    'TokenBase',
    'RoundToken',
    'HexToken',
    'SquareToken',
    'TOKEN_SIZES',
    'TOKEN_PRESETS',
    'HEX_SIZES',
    'SQUARE_SIZES',
    'BATCH_CONFIGS',
    'create_token',
    'generate_batch',
    'list_available_tokens',
]
