#!/usr/bin/env python3
"""
Tests for NormalizedProduct, name normalization and catalog loading.
"""

import json
import tempfile
import unittest
from decimal import Decimal
from pathlib import Path

from standardization.loader import CatalogLoadError, load_catalog, parse_catalog
from standardization.name_normalizer import make_file_safe_key, strip_whitespace, tokenize_name
from standardization.schema import Eshop, NormalizedProduct, NutritionalValues, UnitType


class TestNameNormalizer(unittest.TestCase):

    def test_tokenize_lowercases_and_splits_on_whitespace(self):
        self.assertEqual(tokenize_name("Jablka  Gala\t1kg"), ("jablka", "gala", "1kg"))

    def test_tokenize_keeps_punctuation(self):
        self.assertEqual(tokenize_name("Mleko, 1,5%"), ("mleko,", "1,5%"))

    def test_tokenize_keeps_non_breaking_space(self):
        self.assertEqual(tokenize_name("Mleko\xa0Tatra"), ("mleko\xa0tatra",))
        self.assertEqual(tokenize_name("Mleko\xa0Tatra 1l"), ("mleko\xa0tatra", "1l"))

    def test_product_tokens_split_on_ascii_whitespace_only(self):
        p = NormalizedProduct(name="Mleko\xa0Tatra", url="u", price=Decimal("1"), eshop=Eshop.KOSIK)
        self.assertEqual(p.name_tokens, ("mleko\xa0tatra",))

    def test_strip_whitespace(self):
        self.assertEqual(strip_whitespace(" Jablka Gala\n1 kg "), "JablkaGala1kg")

    def test_strip_whitespace_keeps_non_breaking_space(self):
        self.assertEqual(strip_whitespace("Mleko\xa0Tatra 1l"), "Mleko\xa0Tatra1l")

    def test_file_safe_key(self):
        self.assertEqual(make_file_safe_key("Rohlík tukový 43 g"), "rohlik_tukovy_43_g")
        self.assertEqual(make_file_safe_key("Žluťoučký kůň / 1/2"), "zlutoucky_kun_1_2")
        self.assertEqual(make_file_safe_key("???"), "product")
        self.assertLessEqual(len(make_file_safe_key("x" * 500)), 100)


class TestNormalizedProduct(unittest.TestCase):

    def make(self, **kwargs):
        data = dict(name="Jablka Gala 1kg", url="https://kosik.cz/1", price="39.90", eshop=Eshop.KOSIK)
        data.update(kwargs)
        return NormalizedProduct(**data)

    def test_derived_fields(self):
        p = self.make()
        self.assertEqual(p.name_tokens, ("jablka", "gala", "1kg"))
        self.assertEqual(p.file_safe_key, "jablka_gala_1kg")
        self.assertEqual(p.price, Decimal("39.90"))

    def test_rejects_empty_name_and_url(self):
        with self.assertRaises(ValueError):
            self.make(name="")
        with self.assertRaises(ValueError):
            self.make(url="")

    def test_rejects_negative_price(self):
        with self.assertRaises(ValueError):
            self.make(price=-1)

    def test_zero_price_is_valid(self):
        self.assertEqual(self.make(price=0).price, Decimal("0"))

    def test_core_fields_are_read_only(self):
        p = self.make()
        for attr, value in (('name', 'x'), ('url', 'y'), ('eshop', Eshop.TESCO), ('name_tokens', ())):
            with self.assertRaises(AttributeError):
                setattr(p, attr, value)

    def test_optional_fields_are_settable(self):
        p = self.make()
        p.producer = "Ovocna farma"
        p.description = "Sladka jablka"
        self.assertEqual(p.producer, "Ovocna farma")

    def test_unit_can_be_set_once(self):
        p = self.make()
        p.set_weight(1.0)
        self.assertEqual(p.unit_type, UnitType.WEIGHT)
        self.assertEqual(p.weight, 1.0)
        with self.assertRaises(ValueError):
            p.set_pieces(3)
        with self.assertRaises(ValueError):
            p.set_volume(0.5)

    def test_identity_semantics(self):
        a = self.make()
        b = self.make()
        self.assertNotEqual(a, b)
        self.assertEqual(len({a, b}), 2)

    def test_eshop_from_string(self):
        self.assertIs(self.make(eshop="TESCO").eshop, Eshop.TESCO)

    def test_nutritional_values_reject_negative(self):
        with self.assertRaises(ValueError):
            NutritionalValues(100, 24, Decimal("-1"), Decimal(0), Decimal(0), Decimal(0),
                              Decimal(0), Decimal(0), Decimal(0))

    def test_eshop_order(self):
        self.assertLess(Eshop.KOSIK.order, Eshop.ROHLIK.order)
        self.assertLess(Eshop.ROHLIK.order, Eshop.TESCO.order)


class TestCatalogLoader(unittest.TestCase):

    RECORDS = [
        {
            "name": "Jablka Gala 1kg",
            "url": "https://kosik.cz/1",
            "price": 39.9,
            "producer": "Ovocna farma",
            "weight": 1.0,
        },
        {
            "name": "Mleko polotucne 1l",
            "url": "https://kosik.cz/2",
            "price": "21.90",
            "volume": 1.0,
            "nutritional_values": {
                "energy_kj": 195, "energy_kcal": 46, "fats": "1.5",
                "saturated_fatty_acids": "1.0", "carbohydrates": "4.7", "sugars": "4.7",
                "proteins": "3.3", "salt": "0.1", "fibre": "0",
            },
        },
    ]

    def write(self, directory, data, name="kosik.json"):
        path = Path(directory) / name
        path.write_text(json.dumps(data), encoding='utf-8')
        return path

    def test_load_catalog(self):
        with tempfile.TemporaryDirectory() as tmp:
            products = load_catalog(self.write(tmp, self.RECORDS), Eshop.KOSIK)

        self.assertEqual(len(products), 2)
        apples, milk = products
        self.assertEqual(apples.eshop, Eshop.KOSIK)
        self.assertEqual(apples.unit_type, UnitType.WEIGHT)
        self.assertEqual(apples.producer, "Ovocna farma")
        self.assertEqual(milk.unit_type, UnitType.VOLUME)
        self.assertEqual(milk.price, Decimal("21.90"))
        self.assertEqual(milk.nutritional_values.energy_kcal, 46)

    def test_negative_price_rejected(self):
        data = [{"name": "x", "url": "u", "price": -1}]
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(CatalogLoadError):
                load_catalog(self.write(tmp, data), Eshop.KOSIK)

    def test_missing_name_rejected(self):
        data = [{"url": "u", "price": 1}]
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(CatalogLoadError):
                load_catalog(self.write(tmp, data), Eshop.TESCO)

    def test_two_units_rejected(self):
        data = [{"name": "x", "url": "u", "price": 1, "weight": 1, "pieces": 2}]
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(CatalogLoadError):
                load_catalog(self.write(tmp, data), Eshop.ROHLIK)

    def test_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.json"
            path.write_text("[{", encoding='utf-8')
            with self.assertRaises(CatalogLoadError):
                load_catalog(path, Eshop.KOSIK)

    def test_missing_file(self):
        with self.assertRaises(CatalogLoadError):
            load_catalog(Path("/nonexistent/catalog.json"), Eshop.KOSIK)

    def test_parse_empty_catalog(self):
        self.assertEqual(parse_catalog([], Eshop.TESCO), [])


if __name__ == '__main__':
    unittest.main()
