"""
TagCAD - Parametric 3D models with SCADA-style tag management
"""

from .tags import (
    Tag, HistoryEntry, Alarm, Quality, AlarmSeverity,
    TagError, ReadOnlyViolation, TagNotInGroup, DuplicateTag,
)
from .tag_provider import TagRegistry, HISTORY_LIMIT
from .tag_group import TagGroup
from .model_base import ModelBase

__version__ = "0.1.0"

__all__ = [
    'Tag',
    'HistoryEntry',
    'Alarm',
    'Quality',
    'AlarmSeverity',
    'TagError',
    'ReadOnlyViolation',
    'TagNotInGroup',
    'DuplicateTag',
    'TagRegistry',
    'HISTORY_LIMIT',
    'TagGroup',
    'ModelBase',
]
