import unittest

from astro_insights.domain.converters import (
    chart_to_birth_chart,
    house_strength,
    normalize_date,
    normalize_time,
    provider_datetime,
)
from astro_insights.domain.schemas import ChartData, PlanetPlacement, SignPosition, houses_from_ascendant


class TestNormalisation(unittest.TestCase):

    def test_dates(self):
        self.assertEqual(normalize_date("2000-6-5"), "2000-06-05")
        self.assertEqual(normalize_date("05/06/2000"), "2000-06-05")
        self.assertEqual(normalize_date("05-06-2000"), "2000-06-05")
        with self.assertRaises(ValueError):
            normalize_date("2000-02-30")

    def test_times(self):
        self.assertEqual(normalize_time("9:05"), "09:05")
        self.assertEqual(normalize_time("09:05:59"), "09:05")
        self.assertEqual(normalize_time("12:30 AM"), "00:30")
        self.assertEqual(normalize_time("12:30 pm"), "12:30")
        self.assertEqual(normalize_time("1:30PM"), "13:30")
        with self.assertRaises(ValueError):
            normalize_time("13:00 PM")

    def test_provider_datetime(self):
        self.assertEqual(
            provider_datetime("2000-06-15", "10:15", "+05:30"),
            "2000-06-15T10:15:00+05:30",
        )


class TestDisplayChart(unittest.TestCase):

    def test_house_strength(self):
        self.assertEqual(house_strength(["Jupiter", "Venus"]), "strong")
        self.assertEqual(house_strength(["Saturn"]), "weak")
        self.assertEqual(house_strength([]), "moderate")

    def test_chart_to_birth_chart(self):
        placements = [("Sun", "Mithuna", 0.6), ("Moon", "Tula", 18.3), ("Jupiter", "Simha", 2.0)]
        houses = houses_from_ascendant("Simha", [(n, s) for n, s, _ in placements])
        house_of = {h.sign: h.number for h in houses}
        chart = ChartData(
            sun=SignPosition(sign="Mithuna", degree=0.6),
            moon=SignPosition(sign="Tula", degree=18.3),
            ascendant=SignPosition(sign="Simha", degree=14.2),
            planets=[
                PlanetPlacement(name=n, sign=s, degree=d, house=house_of[s])
                for n, s, d in placements
            ],
            houses=houses,
        )

        display = chart_to_birth_chart(chart, moon_nakshatra="Swati")

        self.assertEqual(display.ascendant, 5)
        self.assertEqual(len(display.houses), 12)
        self.assertEqual(display.houses[0].sign_name, "Leo")
        self.assertEqual(display.houses[0].planets, ["Jupiter"])
        moon = next(p for p in display.planets if p.name == "Moon")
        self.assertEqual(moon.sign, 7)
        self.assertEqual(moon.house, 3)
        self.assertEqual(moon.nakshatra, "Swati")
        self.assertEqual(moon.id, "moon")


if __name__ == "__main__":
    unittest.main()
