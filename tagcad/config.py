"""
Configuration module for the YAML model catalog.

The catalog (index.yaml) lists every model with its module/class,
its category and per-parameter value, bounds and unit. It can also
declare free-standing tags (machine or printer settings).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Type
import importlib
import logging

import yaml

from .model_base import ModelBase
from .tag_provider import TagRegistry
from .tags import Tag


logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / 'index.yaml'


@dataclass
class ParamConfig:
    """Single parameter configuration."""
    value: Any
    min: Optional[float] = None
    max: Optional[float] = None
    unit: str = ''
    description: str = ''

    def to_dict(self) -> dict:
        d = {'value': self.value}
        if self.min is not None:
            d['min'] = self.min
        if self.max is not None:
            d['max'] = self.max
        if self.unit:
            d['unit'] = self.unit
        if self.description:
            d['description'] = self.description
        return d

    @classmethod
    def from_dict(cls, d: Any) -> 'ParamConfig':
        # Bare scalars are accepted as value-only params
        if not isinstance(d, Mapping):
            return cls(value=d)
        return cls(
            value=d.get('value'),
            min=d.get('min'),
            max=d.get('max'),
            unit=d.get('unit', ''),
            description=d.get('description', ''),
        )

    def tag_config(self) -> dict:
        """Registry tag configuration for this parameter."""
        return {
            'default_value': self.value,
            'min': self.min,
            'max': self.max,
            'unit': self.unit,
            'description': self.description,
        }


@dataclass
class ModelConfig:
    """Catalog entry for one model."""
    id: str
    module: str
    class_name: str
    name: str = ''
    category: str = ''
    description: str = ''
    params: Dict[str, ParamConfig] = field(default_factory=dict)
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'description': self.description,
            'module': self.module,
            'class': self.class_name,
            'tags': list(self.tags),
            'params': {k: v.to_dict() for k, v in self.params.items()},
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'ModelConfig':
        for key in ('id', 'module', 'class'):
            if key not in d:
                raise ValueError(f"Model entry is missing '{key}': {d}")
        return cls(
            id=d['id'],
            module=d['module'],
            class_name=d['class'],
            name=d.get('name', d['id']),
            category=d.get('category', ''),
            description=d.get('description', ''),
            params={k: ParamConfig.from_dict(v) for k, v in (d.get('params') or {}).items()},
            tags=list(d.get('tags') or []),
        )

    def default_params(self) -> dict:
        """Get parameter values as simple dict."""
        return {k: v.value for k, v in self.params.items()}

    def load_class(self) -> Type[ModelBase]:
        """Import the model class named by module/class."""
        module = importlib.import_module(self.module)
        model_class = getattr(module, self.class_name, None)
        if model_class is None:
            raise ImportError(f"{self.module} has no class {self.class_name}")
        if not (isinstance(model_class, type) and issubclass(model_class, ModelBase)):
            raise TypeError(f"{self.module}.{self.class_name} is not a ModelBase subclass")
        return model_class

    def create(
        self,
        registry: Optional[TagRegistry] = None,
        sync_tags: bool = True,
        **overrides,
    ) -> ModelBase:
        """
        Create the model with catalog values merged with overrides.

        With a registry, catalog bounds and units are applied to the
        model's tags, and (when sync_tags) the effective params are then
        written through set_params so they are clamped like any other write.
        """
        params = {**self.default_params(), **overrides}
        model_class = self.load_class()

        if registry is None:
            return model_class(self.id, params)

        model = model_class(self.id, params, registry)
        self.apply_limits(model)
        if sync_tags:
            model.set_params({k: v for k, v in params.items() if k in model.tag_group})
        return model

    def apply_limits(self, model: ModelBase) -> List[Tag]:
        """
        Re-register the model's tags with catalog bounds and units.

        The current tag value is kept; subscriptions survive re-registration.
        """
        group = model.tag_group
        if group is None:
            return []

        updated = []
        for key, param in self.params.items():
            if key not in group:
                logger.warning(f"{self.id}: catalog param '{key}' has no tag, skipping")
                continue
            current = group.get_tag(key)
            config = param.tag_config()
            config['default_value'] = current.value
            config['data_type'] = current.data_type
            config['description'] = param.description or current.description
            updated.append(group.registry.register_tag(group.full_name(key), config))
        return updated


@dataclass
class Catalog:
    """Main configuration container for the model catalog."""
    version: str = "1.0"
    settings: Dict[str, Any] = field(default_factory=dict)
    categories: Dict[str, Any] = field(default_factory=dict)
    models: List[ModelConfig] = field(default_factory=list)
    tags: Dict[str, dict] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'version': self.version,
            'settings': dict(self.settings),
            'categories': dict(self.categories),
            'models': [m.to_dict() for m in self.models],
            'tags': dict(self.tags),
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'Catalog':
        d = d or {}
        return cls(
            version=str(d.get('version', '1.0')),
            settings=dict(d.get('settings') or {}),
            categories=dict(d.get('categories') or {}),
            models=[ModelConfig.from_dict(m) for m in (d.get('models') or [])],
            tags=dict(d.get('tags') or {}),
        )

    def save(self, path: Path) -> None:
        """Save catalog to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, allow_unicode=True,
                      default_flow_style=False, sort_keys=False)

    @classmethod
    def load(cls, path: Path = DEFAULT_CATALOG_PATH) -> 'Catalog':
        """Load catalog from YAML file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)

    def get(self, model_id: str) -> ModelConfig:
        for model in self.models:
            if model.id == model_id:
                return model
        raise KeyError(f'Model "{model_id}" not found in configuration')

    def by_category(self, category: str) -> List[ModelConfig]:
        return [m for m in self.models if m.category == category]

    def register_tags(self, registry: TagRegistry) -> List[Tag]:
        return register_tag_configs(self.tags, registry)


def register_tag_configs(tags: Mapping[str, Mapping], registry: TagRegistry) -> List[Tag]:
    """Register each {name: tag config} entry in the registry."""
    return [registry.register_tag(name, config or {}) for name, config in tags.items()]


def load_tag_config(path: Path, registry: TagRegistry) -> List[Tag]:
    """Register the tags declared under 'tags:' in a YAML file."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    tags = register_tag_configs(data.get('tags') or {}, registry)
    logger.info(f"Registered {len(tags)} tag(s) from {path}")
    return tags
