"""
Tag group: organize related tags under one name prefix.
"""

from typing import Any, Dict, List, Mapping, Optional

from .tag_provider import TagCallback, TagRegistry, Unsubscribe
from .tags import Scalar, Tag, TagNotInGroup


class TagGroup:
    """
    Prefix-scoped view of a TagRegistry.

    Local names must be declared with add_tag before use. Dropping a
    group does not remove its tags from the registry.
    """

    def __init__(self, name: str, registry: TagRegistry):
        self.name = name
        self.registry = registry
        self._tags: Dict[str, str] = {}

    def __contains__(self, local_name: str) -> bool:
        return local_name in self._tags

    @property
    def local_names(self) -> List[str]:
        return list(self._tags.keys())

    def full_name(self, local_name: str) -> str:
        try:
            return self._tags[local_name]
        except KeyError:
            raise TagNotInGroup(local_name, self.name) from None

    def add_tag(self, local_name: str, config: Optional[Mapping[str, Any]] = None) -> Tag:
        """Register '{group}.{local_name}' in the registry."""
        full_name = f"{self.name}.{local_name}"
        tag = self.registry.register_tag(full_name, config)
        self._tags[local_name] = full_name
        return tag

    def set_value(self, local_name: str, value: Scalar, **options) -> Tag:
        return self.registry.set_value(self.full_name(local_name), value, **options)

    def get_value(self, local_name: str) -> Scalar:
        return self.registry.get_value(self.full_name(local_name))

    def get_tag(self, local_name: str) -> Optional[Tag]:
        return self.registry.get_tag(self.full_name(local_name))

    def subscribe(self, local_name: str, callback: TagCallback) -> Unsubscribe:
        return self.registry.subscribe(self.full_name(local_name), callback)

    def get_all_values(self) -> Dict[str, Scalar]:
        """Current values keyed by local name, in the order tags were added."""
        return {
            local_name: self.registry.get_value(full_name)
            for local_name, full_name in self._tags.items()
        }

    def set_values(self, values: Mapping[str, Scalar]) -> None:
        """Apply each value in turn. Not atomic: earlier writes stay if a later one fails."""
        for local_name, value in values.items():
            self.set_value(local_name, value)
