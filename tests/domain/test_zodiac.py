import unittest

from astro_insights.domain import zodiac


class TestZodiac(unittest.TestCase):

    def test_normalize_accepts_spelling_variants(self):
        self.assertEqual(zodiac.normalize_sign("Vrishchika"), "Vrischika")
        self.assertEqual(zodiac.normalize_sign("karkata"), "Karka")
        self.assertEqual(zodiac.normalize_sign("Meenam"), "Meena")
        self.assertEqual(zodiac.normalize_sign(" Leo "), "Simha")
        self.assertEqual(zodiac.normalize_sign("Simha"), "Simha")

    def test_normalize_unknown_returns_none(self):
        self.assertIsNone(zodiac.normalize_sign("Ophiuchus"))
        self.assertIsNone(zodiac.normalize_sign(""))
        self.assertIsNone(zodiac.normalize_sign(None))

    def test_sign_index_rejects_unknown(self):
        with self.assertRaises(ValueError):
            zodiac.sign_index("Nowhere")

    def test_rotation_holds_for_every_ascendant(self):
        for a, ascendant in enumerate(zodiac.SIGNS):
            houses = zodiac.rotate_signs(ascendant)
            self.assertEqual(len(houses), 12)
            for i, sign in enumerate(houses):
                self.assertEqual(zodiac.SIGNS.index(sign), (a + i) % 12)

    def test_simha_rotation(self):
        houses = zodiac.rotate_signs("Simha")
        self.assertEqual(houses[0], "Simha")
        self.assertEqual(houses[1], "Kanya")
        self.assertEqual(houses[11], "Karka")

    def test_lords_and_english_names(self):
        self.assertEqual(zodiac.lord_of("Simha"), "Sun")
        self.assertEqual(zodiac.lord_of("Karka"), "Moon")
        self.assertEqual(zodiac.lord_of("Meena"), "Jupiter")
        self.assertEqual(zodiac.english_name("Vrischika"), "Scorpio")

    def test_approximate_sun_sign(self):
        self.assertEqual(zodiac.approximate_sun_sign(6, 15), "Mithuna")
        self.assertEqual(zodiac.approximate_sun_sign(6, 21), "Karka")
        self.assertEqual(zodiac.approximate_sun_sign(1, 5), "Makara")
        self.assertEqual(zodiac.approximate_sun_sign(12, 25), "Makara")


if __name__ == "__main__":
    unittest.main()
