import logging
import unittest

from tagcad.models import (
    BATCH_CONFIGS,
    CableClip,
    Enclosure,
    HexToken,
    MountingBracket,
    RoundToken,
    SquareToken,
    create_model,
    create_token,
    generate_batch,
    get_all_models,
    get_model_class,
    list_available_tokens,
)
from tagcad.quality_gate import validate_shape
from tagcad.tag_provider import TagRegistry


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("TestModels")


class TestGeometry(unittest.TestCase):
    def assertSolid(self, shape):
        result = validate_shape(shape)
        self.assertTrue(result.is_valid, result.errors)
        self.assertGreater(shape.volume, 0)

    def test_01_default_models_are_valid_solids(self):
        """Every shipped model builds a valid solid from its defaults."""
        for model_class in (MountingBracket, Enclosure, CableClip, RoundToken, HexToken, SquareToken):
            with self.subTest(model=model_class.__name__):
                shape = model_class().regenerate()
                logger.info(f"{model_class.__name__}: volume={shape.volume:.1f}")
                self.assertSolid(shape)

    def test_02_bracket_holes_remove_material(self):
        plain = MountingBracket(params={'hole_count': 0}).generate()
        drilled = MountingBracket(params={'hole_count': 4, 'hole_spacing': 10}).generate()
        self.assertLess(drilled.volume, plain.volume)

    def test_03_enclosure_is_open_shell(self):
        enclosure = Enclosure(params={'mounting_holes': False}).generate()
        outer = 104 * 84 * 42
        self.assertLess(enclosure.volume, outer / 2)

    def test_04_thicker_tab_adds_material(self):
        thin = CableClip(params={'cable_diameter': 4}).generate()
        thick = CableClip(params={'cable_diameter': 4, 'clip_thickness': 4}).generate()
        self.assertGreater(thick.volume, thin.volume)

    def test_05_token_options(self):
        plain = RoundToken(params={'bevel': 0}).generate()
        hollow = RoundToken(params={'bevel': 0, 'hollow': True}).generate()
        lipped = RoundToken(params={'bevel': 0, 'lip_height': 1}).generate()
        grooved = RoundToken(params={'bevel': 0, 'groove_rings': 2}).generate()
        self.assertLess(hollow.volume, plain.volume)
        self.assertGreater(lipped.volume, plain.volume)
        self.assertLess(grooved.volume, plain.volume)

    def test_06_hex_is_flat_to_flat(self):
        hex_token = HexToken(params={'diameter': 30, 'height': 2})
        self.assertAlmostEqual(hex_token.circumradius(), 30 / 3 ** 0.5)
        shape = hex_token.generate()
        bbox = shape.bounding_box()
        self.assertAlmostEqual(min(bbox.size.X, bbox.size.Y), 30, places=2)
        self.assertAlmostEqual(bbox.size.Z, 2, places=2)

        drilled = HexToken(params={'diameter': 30, 'height': 2, 'center_hole': True}).generate()
        self.assertLess(drilled.volume, shape.volume)

    def test_07_square_rectangle(self):
        square = SquareToken(params={'width': 40, 'depth': 20, 'corner_radius': 0}).generate()
        self.assertAlmostEqual(square.volume, 40 * 20 * 3, places=2)
        self.assertNotIn('diameter', SquareToken().params)


class TestRegistry(unittest.TestCase):
    def test_01_all_models_listed(self):
        models = get_all_models()
        self.assertEqual(len(models), 6)
        names = {m['name'] for m in models}
        self.assertIn('mounting-bracket', names)
        self.assertIn('hex-token', names)
        self.assertEqual({m['category'] for m in models},
                         {'brackets', 'enclosures', 'accessories', 'tokens'})

    def test_02_lookup(self):
        self.assertIs(get_model_class('cable-clip'), CableClip)
        with self.assertRaises(KeyError):
            get_model_class('spaceship')

    def test_03_create_model_binds_tags(self):
        registry = TagRegistry()
        model = create_model('enclosure', {'width': 120}, registry)
        self.assertIsInstance(model, Enclosure)
        self.assertEqual(model.name, 'enclosure')
        self.assertEqual(model.params['width'], 120)
        self.assertIn('enclosure.wall_thickness', registry)

        registry.set_value('enclosure.width', 60)
        self.assertEqual(model.params['width'], 60)


class TestTokens(unittest.TestCase):
    def test_01_create_token(self):
        token = create_token('round', 'dnd-large')
        self.assertIsInstance(token, RoundToken)
        self.assertEqual(token.name, 'round-token-dnd-large')
        self.assertEqual(token.params['diameter'], 50)
        self.assertEqual(token.params['height'], 4)

    def test_02_unknown_size_falls_back_to_medium(self):
        token = create_token('square', 'enormous')
        self.assertEqual(token.params['size'], 32)

    def test_03_unknown_type(self):
        with self.assertRaises(ValueError):
            create_token('triangle')

    def test_04_overrides_and_registry(self):
        registry = TagRegistry()
        token = create_token('hex', 'catan', registry, center_hole=True)
        self.assertTrue(token.params['center_hole'])
        self.assertEqual(registry.get_value('hex-token-catan.diameter'), 32)

    def test_05_listing(self):
        tokens = list_available_tokens()
        self.assertIn({'type': 'hex', 'size': 'catan', 'name': 'hex-token-catan'}, tokens)

    def test_06_generate_batch(self):
        batch = generate_batch('minimal')
        self.assertEqual([t['name'] for t in batch], ['round-token-small', 'round-token-medium'])
        for item in batch:
            self.assertGreater(item['geometry'].volume, 0)

        with self.assertRaises(ValueError):
            generate_batch('nope')
        self.assertIn('gaming', BATCH_CONFIGS)


if __name__ == '__main__':
    unittest.main()
