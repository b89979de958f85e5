import unittest

from tagcad.model_base import MODEL_VERSION, ModelBase
from tagcad.tag_provider import TagRegistry
from tagcad.tags import TagNotInGroup


class Plate(ModelBase):
    default_name = 'plate'

    def __init__(self, *args, **kwargs):
        self.changes = []
        self.generated = 0
        super().__init__(*args, **kwargs)

    def get_default_params(self):
        return {'width': 50, 'label': 'A', 'vented': False}

    def on_parameter_change(self, key, new_value):
        super().on_parameter_change(key, new_value)
        self.changes.append((key, new_value))

    def generate(self):
        self.generated += 1
        return ('plate', dict(self.params))


class TestUnboundModel(unittest.TestCase):
    def test_01_params_from_defaults_and_overrides(self):
        model = Plate(params={'width': 80})
        self.assertEqual(model.name, 'plate')
        self.assertEqual(model.params, {'width': 80, 'label': 'A', 'vented': False})
        self.assertFalse(model.tag_bound)
        self.assertIsNone(model.geometry)
        self.assertEqual(model.metadata['version'], MODEL_VERSION)

    def test_02_set_param_without_registry(self):
        model = Plate()
        model.set_param('width', 999)
        self.assertEqual(model.get_param('width'), 999)
        self.assertEqual(model.changes, [])

    def test_03_base_contract(self):
        model = ModelBase('raw')
        self.assertEqual(model.get_default_params(), {})
        self.assertEqual(model.params, {})
        with self.assertRaises(NotImplementedError):
            model.generate()
        with self.assertRaises(NotImplementedError):
            model.regenerate()

    def test_04_regenerate_stores_geometry(self):
        model = Plate()
        before = model.metadata['modified']
        geometry = model.regenerate()
        self.assertEqual(geometry, ('plate', model.params))
        self.assertIs(model.geometry, geometry)
        self.assertGreaterEqual(model.metadata['modified'], before)

    def test_05_serialization_round_trip(self):
        model = Plate('custom', {'width': 12.5, 'label': 'Z', 'vented': True})
        data = model.to_dict()
        restored = Plate.from_dict(data)
        self.assertEqual(restored.to_dict(), data)
        self.assertEqual(restored.name, 'custom')

    def test_06_metadata_view(self):
        model = Plate()
        meta = model.get_metadata()
        self.assertEqual(meta['name'], 'plate')
        self.assertEqual(meta['params'], model.params)
        self.assertIn('created', meta)


class TestBoundModel(unittest.TestCase):
    def setUp(self):
        self.registry = TagRegistry()

    def test_01_binding_end_to_end(self):
        model = Plate(registry=self.registry)
        self.assertEqual(model.params['width'], 50)
        self.assertEqual(self.registry.get_value(f"{model.name}.width"), 50)

        model.set_param('width', 75)
        self.assertEqual(model.params['width'], 75)
        self.assertEqual(self.registry.get_value(f"{model.name}.width"), 75)

    def test_02_clamped_value_wins(self):
        model = Plate(registry=self.registry)
        self.registry.register_tag(f"{model.name}.width", {'default_value': 50, 'min': 10, 'max': 60})

        model.set_param('width', 999)
        self.assertEqual(model.params['width'], 60)
        self.assertEqual(self.registry.get_value('plate.width'), 60)
        self.assertEqual(model.changes, [('width', 60)])

    def test_03_tag_config(self):
        Plate(registry=self.registry)
        tag = self.registry.get_tag('plate.label')
        self.assertEqual(tag.value, 'A')
        self.assertEqual(tag.data_type, 'str')
        self.assertEqual(tag.description, 'plate label parameter')
        self.assertEqual(self.registry.get_tag('plate.width').data_type, 'int')
        self.assertEqual(self.registry.get_tag('plate.vented').data_type, 'bool')

    def test_04_tags_start_at_declared_defaults(self):
        model = Plate(params={'width': 80}, registry=self.registry)
        self.assertEqual(model.params['width'], 80)
        self.assertEqual(self.registry.get_value('plate.width'), 50)

    def test_05_override_key_without_default_fails(self):
        with self.assertRaises(TagNotInGroup):
            Plate(params={'depth': 3}, registry=self.registry)

    def test_06_external_write_updates_params(self):
        model = Plate(registry=self.registry)
        self.registry.set_value('plate.label', 'B')
        self.assertEqual(model.params['label'], 'B')
        self.assertEqual(model.changes, [('label', 'B')])

    def test_07_change_hook_can_regenerate(self):
        class LivePlate(Plate):
            def on_parameter_change(self, key, new_value):
                super().on_parameter_change(key, new_value)
                self.regenerate()

        model = LivePlate(registry=self.registry)
        self.registry.set_value('plate.width', 20)
        self.assertEqual(model.generated, 1)
        self.assertEqual(model.geometry[1]['width'], 20)

    def test_08_set_params_in_order(self):
        model = Plate(registry=self.registry)
        model.set_params({'width': 30, 'label': 'C'})
        self.assertEqual(model.changes, [('width', 30), ('label', 'C')])
        self.assertEqual(model.tag_group.get_all_values(), {'width': 30, 'label': 'C', 'vented': False})

    def test_09_two_models_do_not_share_tags(self):
        first = Plate('left', registry=self.registry)
        second = Plate('right', registry=self.registry)
        first.set_param('width', 10)
        self.assertEqual(second.params['width'], 50)
        self.assertEqual(self.registry.get_value('right.width'), 50)

    def test_10_dispose_unsubscribes(self):
        model = Plate(registry=self.registry)
        self.assertEqual(self.registry.subscriber_count('plate.width'), 1)
        model.dispose()
        model.dispose()
        self.assertEqual(self.registry.subscriber_count('plate.width'), 0)

        self.registry.set_value('plate.width', 5)
        self.assertEqual(model.params['width'], 50)
        self.assertEqual(model.changes, [])

    def test_11_context_manager_disposes(self):
        with Plate(registry=self.registry) as model:
            self.registry.set_value('plate.width', 7)
            self.assertEqual(model.params['width'], 7)
        self.registry.set_value('plate.width', 8)
        self.assertEqual(model.params['width'], 7)

    def test_12_restore_with_registry(self):
        model = Plate(registry=self.registry)
        model.set_param('width', 42)
        data = model.to_dict()

        other = TagRegistry()
        restored = Plate.from_dict(data, other)
        self.assertEqual(restored.params['width'], 42)
        self.assertEqual(restored.metadata, data['metadata'])
        # Tags start at declared defaults until synchronized
        self.assertEqual(other.get_value('plate.width'), 50)


if __name__ == '__main__':
    unittest.main()
