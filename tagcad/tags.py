"""
Tag data model: records, history entries, alarms and errors.

A tag is a named observable value owned by a TagRegistry. The records
here are plain dataclasses; all mutation goes through the registry.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union
import numbers


Scalar = Union[float, int, str, bool, None]


class Quality(str, Enum):
    """Data quality annotation attached to every write."""
    GOOD = "GOOD"
    BAD = "BAD"
    UNCERTAIN = "UNCERTAIN"


class AlarmSeverity(str, Enum):
    """Alarm severity. LOW/HIGH come from bounds checks, CRITICAL from callers."""
    LOW = "LOW"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class TagError(Exception):
    """Base class for tag errors."""


class ReadOnlyViolation(TagError):
    """Write attempted on a non-writeable tag without force."""

    def __init__(self, name: str):
        super().__init__(f'Tag "{name}" is read-only')
        self.name = name


class TagNotInGroup(TagError, KeyError):
    """Group operation referenced a local name never added to the group."""

    def __init__(self, local_name: str, group_name: str):
        super().__init__(f'Tag "{local_name}" not found in group "{group_name}"')
        self.local_name = local_name
        self.group_name = group_name

    def __str__(self) -> str:
        return self.args[0]


class DuplicateTag(TagError):
    """Re-registration of an existing tag on a strict registry."""

    def __init__(self, name: str):
        super().__init__(f'Tag "{name}" is already registered')
        self.name = name


@dataclass
class Tag:
    """
    Registry record for one observable parameter.

    Only TagRegistry.set_value updates value, quality and timestamp.
    """
    name: str
    value: Scalar = None
    data_type: str = 'number'
    unit: str = ''
    min: Optional[float] = None
    max: Optional[float] = None
    quality: Quality = Quality.GOOD
    timestamp: float = 0.0
    description: str = ''
    writeable: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def bounded(self) -> bool:
        return self.min is not None or self.max is not None

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'value': self.value,
            'data_type': self.data_type,
            'unit': self.unit,
            'min': self.min,
            'max': self.max,
            'quality': self.quality.value,
            'timestamp': self.timestamp,
            'description': self.description,
            'writeable': self.writeable,
            'metadata': dict(self.metadata),
        }


@dataclass(frozen=True)
class HistoryEntry:
    """One past value of a tag."""
    value: Scalar
    timestamp: float
    quality: Quality

    def to_dict(self) -> dict:
        return {
            'value': self.value,
            'timestamp': self.timestamp,
            'quality': self.quality.value,
        }


@dataclass
class Alarm:
    """Out-of-range condition recorded against a tag."""
    tag_name: str
    severity: AlarmSeverity
    message: str
    timestamp: float
    acknowledged: bool = False

    def to_dict(self) -> dict:
        return {
            'tag_name': self.tag_name,
            'severity': self.severity.value,
            'message': self.message,
            'timestamp': self.timestamp,
            'acknowledged': self.acknowledged,
        }


def is_number(value: Any) -> bool:
    """True for real numbers (int, float, Fraction, Decimal, numpy scalars), not bool."""
    return isinstance(value, (numbers.Real, Decimal)) and not isinstance(value, bool)


def is_nan(value: Any) -> bool:
    # NaN is the only value that compares unequal to itself
    return value != value
