"""
Base class for parametric 3D models.

A model is a named parameter bag with a generate() contract. When a
TagRegistry is supplied, each default parameter becomes a tag in a
group named after the model, and tag changes flow back into params.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional
import logging
import time

from .tag_group import TagGroup
from .tag_provider import TagRegistry
from .tags import Scalar


logger = logging.getLogger(__name__)

MODEL_VERSION = '1.0.0'


class ModelBase:
    """
    Parametric model bound (optionally) to a tag registry.

    Subclasses override get_default_params() and generate(). set_param()
    stores the raw value locally and then writes the tag; the tag
    notification stores the clamped value and fires on_parameter_change(),
    so the clamped value is what ends up in params.
    """

    default_name = 'model'

    def __init__(
        self,
        name: Optional[str] = None,
        params: Optional[Mapping[str, Scalar]] = None,
        registry: Optional[TagRegistry] = None,
    ):
        self.name = name or self.default_name
        self.params: Dict[str, Scalar] = {**self.get_default_params(), **(params or {})}
        self.geometry: Any = None
        now = time.time()
        self.metadata: Dict[str, Any] = {
            'created': now,
            'modified': now,
            'version': MODEL_VERSION,
        }
        self.tag_group: Optional[TagGroup] = None
        self._unsubscribers: List[Callable[[], None]] = []

        if registry is not None:
            self.tag_group = TagGroup(self.name, registry)
            self.register_tags()
            self.bind_tags_to_params()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, params={self.params!r})"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    @property
    def tag_bound(self) -> bool:
        return self.tag_group is not None

    def get_default_params(self) -> Dict[str, Scalar]:
        """Override to provide default parameters."""
        return {}

    def register_tags(self) -> None:
        """Register each declared default parameter as a tag."""
        if self.tag_group is None:
            return

        # Tags start at the class defaults, not at constructor overrides
        for key, value in self.get_default_params().items():
            self.tag_group.add_tag(key, {
                'default_value': value,
                'data_type': type(value).__name__,
                'description': f"{self.name} {key} parameter",
            })

    def bind_tags_to_params(self) -> None:
        """Subscribe to every parameter's tag so external writes update params."""
        if self.tag_group is None:
            return

        for key in list(self.params.keys()):
            self._unsubscribers.append(
                self.tag_group.subscribe(key, self._make_binding(key))
            )

    def _make_binding(self, key: str):
        def on_tag_change(new_value, old_value=None, tag=None):
            self.params[key] = new_value
            self.on_parameter_change(key, new_value)
        return on_tag_change

    def dispose(self) -> None:
        """Remove all tag subscriptions held by this model. Safe to call twice."""
        while self._unsubscribers:
            self._unsubscribers.pop()()

    def on_parameter_change(self, key: str, new_value: Scalar) -> None:
        """Called when a parameter changes through the tag system."""
        self.metadata['modified'] = time.time()

    def set_param(self, key: str, value: Scalar) -> None:
        self.params[key] = value
        if self.tag_group is not None:
            self.tag_group.set_value(key, value)
        self.metadata['modified'] = time.time()

    def get_param(self, key: str) -> Scalar:
        return self.params.get(key)

    def set_params(self, params: Mapping[str, Scalar]) -> None:
        for key, value in params.items():
            self.set_param(key, value)

    def generate(self) -> Any:
        """Build geometry from self.params. Must be implemented by subclass."""
        raise NotImplementedError(f"{type(self).__name__}.generate() must be implemented by subclass")

    def regenerate(self) -> Any:
        logger.debug(f"Regenerating {self.name}")
        self.geometry = self.generate()
        self.metadata['modified'] = time.time()
        return self.geometry

    def get_metadata(self) -> dict:
        return {
            **self.metadata,
            'name': self.name,
            'params': dict(self.params),
        }

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'params': dict(self.params),
            'metadata': dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, d: dict, registry: Optional[TagRegistry] = None) -> 'ModelBase':
        model = cls(d.get('name'), d.get('params', {}), registry)
        if 'metadata' in d:
            model.metadata = dict(d['metadata'])
        return model
