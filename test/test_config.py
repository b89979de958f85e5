import shutil
import tempfile
import unittest
from pathlib import Path

import yaml

from tagcad.config import (
    DEFAULT_CATALOG_PATH,
    Catalog,
    ModelConfig,
    ParamConfig,
    load_tag_config,
)
from tagcad.models import MountingBracket
from tagcad.tag_provider import TagRegistry


class TestParamConfig(unittest.TestCase):
    def test_01_scalar_shorthand(self):
        param = ParamConfig.from_dict(12)
        self.assertEqual(param.value, 12)
        self.assertIsNone(param.min)
        self.assertEqual(param.to_dict(), {'value': 12})

    def test_02_tag_config(self):
        param = ParamConfig.from_dict({'value': 5, 'min': 1, 'max': 9, 'unit': 'mm'})
        self.assertEqual(param.tag_config(), {
            'default_value': 5, 'min': 1, 'max': 9, 'unit': 'mm', 'description': '',
        })


class TestCatalog(unittest.TestCase):
    def setUp(self):
        self.catalog = Catalog.load(DEFAULT_CATALOG_PATH)
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_01_bundled_catalog(self):
        self.assertEqual(len(self.catalog.models), 6)
        self.assertEqual(self.catalog.settings['format'], 'stl')
        self.assertEqual(
            [m.id for m in self.catalog.by_category('tokens')],
            ['round-token', 'hex-token', 'square-token'],
        )
        bracket = self.catalog.get('mounting-bracket')
        self.assertEqual(bracket.class_name, 'MountingBracket')
        self.assertEqual(bracket.params['width'].max, 200)

    def test_02_unknown_model(self):
        with self.assertRaises(KeyError):
            self.catalog.get('spaceship')

    def test_03_every_entry_loads(self):
        for entry in self.catalog.models:
            with self.subTest(model=entry.id):
                model = entry.create()
                self.assertEqual(model.name, entry.id)
                self.assertFalse(model.tag_bound)
                for key in entry.params:
                    self.assertIn(key, model.params)

    def test_04_create_applies_limits(self):
        registry = TagRegistry()
        model = self.catalog.get('mounting-bracket').create(registry, width=500)

        self.assertIsInstance(model, MountingBracket)
        tag = registry.get_tag('mounting-bracket.width')
        self.assertEqual((tag.min, tag.max, tag.unit), (20, 200, 'mm'))
        self.assertEqual(tag.description, 'Plate width')
        self.assertEqual(tag.data_type, 'int')
        self.assertEqual(model.params['width'], 200)
        self.assertEqual(tag.value, 200)
        self.assertEqual(len(registry.get_alarms('mounting-bracket.width')), 1)

        registry.set_value('mounting-bracket.width', 5)
        self.assertEqual(model.params['width'], 20)

    def test_05_create_without_sync(self):
        registry = TagRegistry()
        model = self.catalog.get('cable-clip').create(registry, sync_tags=False, cable_diameter=8)
        self.assertEqual(model.params['cable_diameter'], 8)
        self.assertEqual(registry.get_value('cable-clip.cable_diameter'), 6)
        self.assertEqual(registry.get_tag('cable-clip.cable_diameter').max, 20)

    def test_06_catalog_tags(self):
        registry = TagRegistry()
        tags = self.catalog.register_tags(registry)
        self.assertEqual(len(tags), 3)
        self.assertEqual(registry.get_value('printer.nozzle_temperature'), 200)
        registry.set_value('printer.speed', 1000)
        self.assertEqual(registry.get_value('printer.speed'), 300)

    def test_07_save_and_load(self):
        path = self.test_dir / 'nested' / 'catalog.yaml'
        self.catalog.save(path)
        restored = Catalog.load(path)
        self.assertEqual(restored.to_dict(), self.catalog.to_dict())

    def test_08_bad_entries(self):
        with self.assertRaises(ValueError):
            ModelConfig.from_dict({'id': 'x', 'module': 'tagcad.models.brackets'})

        entry = ModelConfig(id='x', module='tagcad.models.brackets', class_name='Nothing')
        with self.assertRaises(ImportError):
            entry.load_class()

        entry = ModelConfig(id='x', module='tagcad.config', class_name='Catalog')
        with self.assertRaises(TypeError):
            entry.load_class()

    def test_09_load_tag_config(self):
        path = self.test_dir / 'tags.yaml'
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump({'tags': {
                'line.speed': {'default_value': 10, 'min': 0, 'max': 20, 'unit': 'm/min'},
                'line.enabled': {'default_value': True, 'data_type': 'bool'},
            }}, f)

        registry = TagRegistry()
        with self.assertLogs('tagcad.config', level='INFO'):
            tags = load_tag_config(path, registry)
        self.assertEqual([t.name for t in tags], ['line.speed', 'line.enabled'])
        self.assertEqual(registry.get_tag('line.speed').unit, 'm/min')
        self.assertIs(registry.get_value('line.enabled'), True)


if __name__ == '__main__':
    unittest.main()
