"""
Tag registry: SCADA-style real-time value management.

Owns every tag, its bounded history, its alarms and its subscribers.
All writes go through set_value, which validates, clamps, records and
then notifies subscribers synchronously before returning.
"""

from collections import deque
from typing import Any, Callable, Deque, Dict, Iterable, List, Mapping, Optional, Union
import logging
import re
import time
import uuid

from .tags import (
    Alarm,
    AlarmSeverity,
    DuplicateTag,
    HistoryEntry,
    Quality,
    ReadOnlyViolation,
    Scalar,
    Tag,
    is_nan,
    is_number,
)


logger = logging.getLogger(__name__)

HISTORY_LIMIT = 1000

TagCallback = Callable[[Scalar, Scalar, Tag], None]
Unsubscribe = Callable[[], None]

# Config keys understood by register_tag; anything else lands in Tag.metadata
TAG_CONFIG_KEYS = (
    'default_value', 'data_type', 'unit', 'min', 'max', 'description', 'writeable',
)


def _coerce_quality(quality: Union[Quality, str, None]) -> Quality:
    if quality is None:
        return Quality.GOOD
    return Quality(quality)


class TagRegistry:
    """
    Single source of truth for tag values.

    Unknown tags degrade to None/empty on read and are auto-registered
    on write. Writes fail only on ReadOnlyViolation or an unknown quality.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._tags: Dict[str, Tag] = {}
        self._subscribers: Dict[str, Dict[str, TagCallback]] = {}
        self._history: Dict[str, Deque[HistoryEntry]] = {}
        self._alarms: Dict[str, List[Alarm]] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._tags

    def __len__(self) -> int:
        return len(self._tags)

    def register_tag(self, name: str, config: Optional[Mapping[str, Any]] = None) -> Tag:
        """
        Register a tag, overwriting any previous record of the same name.

        Overwriting resets the tag's history; subscribers and alarms are kept.

        Args:
            name: Fully qualified tag name (e.g. 'bracket.width')
            config: default_value, data_type, unit, min, max, description,
                writeable. Other keys are stored in Tag.metadata.
        """
        config = dict(config or {})

        if self.strict and name in self._tags:
            raise DuplicateTag(name)

        min_value = config.get('min')
        max_value = config.get('max')
        if min_value is not None and max_value is not None and min_value > max_value:
            raise ValueError(
                f'Tag "{name}": min {min_value} is greater than max {max_value}'
            )

        tag = Tag(
            name=name,
            value=config.get('default_value'),
            data_type=config.get('data_type') or 'number',
            unit=config.get('unit') or '',
            min=min_value,
            max=max_value,
            quality=Quality.GOOD,
            timestamp=time.time(),
            description=config.get('description') or '',
            writeable=config.get('writeable', True),
            metadata={k: v for k, v in config.items() if k not in TAG_CONFIG_KEYS},
        )

        self._tags[name] = tag
        self._history[name] = deque(maxlen=HISTORY_LIMIT)
        return tag

    def _get_or_create(self, name: str, value: Scalar) -> Tag:
        tag = self._tags.get(name)
        if tag is None:
            logger.warning(f'Tag "{name}" not registered. Auto-registering...')
            tag = self.register_tag(name, {'default_value': value})
        return tag

    def set_value(
        self,
        name: str,
        value: Scalar,
        quality: Union[Quality, str, None] = None,
        force: bool = False,
    ) -> Tag:
        """
        Write a tag value, clamping to bounds and notifying subscribers.

        Out-of-range numbers are clamped to the violated bound and an alarm
        is recorded; the write still succeeds. NaN on a bounded tag is
        stored as the lower bound (upper bound if there is no lower one)
        with the matching alarm. Compare the returned tag's value with the
        value passed in to detect a clamp.

        Raises:
            ReadOnlyViolation: tag is not writeable and force is not set.
            ValueError: quality is not a Quality name. Nothing is written.
        """
        quality = _coerce_quality(quality)

        tag = self._get_or_create(name, value)

        if not tag.writeable and not force:
            raise ReadOnlyViolation(name)

        if is_number(value):
            if is_nan(value) and tag.bounded:
                if tag.min is not None:
                    self.set_alarm(name, AlarmSeverity.LOW, f"Value {value} is not a number, using minimum {tag.min}")
                    value = tag.min
                else:
                    self.set_alarm(name, AlarmSeverity.HIGH, f"Value {value} is not a number, using maximum {tag.max}")
                    value = tag.max
            if tag.min is not None and value < tag.min:
                self.set_alarm(name, AlarmSeverity.LOW, f"Value {value} below minimum {tag.min}")
                value = tag.min
            if tag.max is not None and value > tag.max:
                self.set_alarm(name, AlarmSeverity.HIGH, f"Value {value} above maximum {tag.max}")
                value = tag.max

        old_value = tag.value

        tag.value = value
        tag.timestamp = max(time.time(), tag.timestamp)
        tag.quality = quality

        self._history[name].append(HistoryEntry(value, tag.timestamp, tag.quality))

        self._notify_subscribers(name, value, old_value)

        return tag

    def get_value(self, name: str) -> Scalar:
        tag = self._tags.get(name)
        return tag.value if tag is not None else None

    def get_tag(self, name: str) -> Optional[Tag]:
        return self._tags.get(name)

    def subscribe(self, names: Union[str, Iterable[str]], callback: TagCallback) -> Unsubscribe:
        """
        Subscribe a callback(new_value, old_value, tag) to one or more tags.

        Returns a function that removes this subscription from every name
        it was added to. Calling it again is a no-op.
        """
        if isinstance(names, str):
            names = [names]
        else:
            names = list(names)

        subscription_id = f"sub_{uuid.uuid4().hex}"
        for name in names:
            self._subscribers.setdefault(name, {})[subscription_id] = callback

        def unsubscribe() -> None:
            for name in names:
                subs = self._subscribers.get(name)
                if subs:
                    subs.pop(subscription_id, None)

        return unsubscribe

    def subscriber_count(self, name: str) -> int:
        return len(self._subscribers.get(name, {}))

    def _notify_subscribers(self, name: str, value: Scalar, old_value: Scalar) -> None:
        subs = self._subscribers.get(name)
        if not subs:
            return

        tag = self._tags[name]
        # Snapshot so callbacks may (un)subscribe while we iterate
        for callback in list(subs.values()):
            try:
                callback(value, old_value, tag)
            except Exception:
                logger.exception(f"Error in subscriber callback for {name}")

    def set_alarm(
        self,
        name: str,
        severity: Union[AlarmSeverity, str],
        message: str,
    ) -> Alarm:
        """Record an alarm against a tag. Never affects the tag's value."""
        severity = AlarmSeverity(severity)
        alarm = Alarm(
            tag_name=name,
            severity=severity,
            message=message,
            timestamp=time.time(),
        )
        self._alarms.setdefault(name, []).append(alarm)
        logger.warning(f"[ALARM {severity.value}] {name}: {message}")
        return alarm

    def get_alarms(self, name: Optional[str] = None, active_only: bool = False) -> List[Alarm]:
        """Alarms for one tag, or for all tags in registration order of first alarm."""
        if name is not None:
            alarms = list(self._alarms.get(name, []))
        else:
            alarms = [a for tag_alarms in self._alarms.values() for a in tag_alarms]
        if active_only:
            alarms = [a for a in alarms if not a.acknowledged]
        return alarms

    def acknowledge_alarms(self, name: str) -> int:
        """Acknowledge every alarm of a tag. Returns the number newly acknowledged."""
        count = 0
        for alarm in self._alarms.get(name, []):
            if not alarm.acknowledged:
                alarm.acknowledged = True
                count += 1
        return count

    def get_history(self, name: str, limit: int = 100) -> List[HistoryEntry]:
        """Most recent `limit` history entries, oldest first."""
        history = self._history.get(name)
        if not history or limit <= 0:
            return []
        return list(history)[-limit:]

    def get_tags(self, pattern: str = '*') -> List[Tag]:
        """
        Tags whose name matches a glob pattern ('*' matches any run of characters).

        Returned in registration order.
        """
        if pattern == '*':
            return list(self._tags.values())

        regex = re.compile(re.escape(pattern).replace(r'\*', '.*'), re.DOTALL)
        return [tag for tag in self._tags.values() if regex.fullmatch(tag.name)]

    def export_values(self, names: Optional[Iterable[str]] = None) -> Dict[str, dict]:
        """Snapshot {name: {value, quality, timestamp}}; unknown names are skipped."""
        if names is None:
            names = list(self._tags.keys())

        result = {}
        for name in names:
            tag = self._tags.get(name)
            if tag is not None:
                result[name] = {
                    'value': tag.value,
                    'quality': tag.quality.value,
                    'timestamp': tag.timestamp,
                }
        return result

    def import_values(self, data: Mapping[str, Any]) -> None:
        """
        Restore values from export_values output or a plain {name: value} map.

        Imports always force the write, bypassing read-only protection.
        """
        for name, entry in data.items():
            if isinstance(entry, Mapping) and 'value' in entry:
                self.set_value(name, entry['value'], quality=entry.get('quality'), force=True)
            else:
                self.set_value(name, entry, force=True)

    def clear(self) -> None:
        """Drop all tags, subscriptions, history and alarms without notification."""
        self._tags.clear()
        self._subscribers.clear()
        self._history.clear()
        self._alarms.clear()
