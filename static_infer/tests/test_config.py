"""
Tests for configuration loading and JavaScript value helpers.
"""

from __future__ import annotations

import math
from unittest import TestCase

from static_infer.config import InferenceConfig, MockFormat, MockWriteOptions
from static_infer.utils import (
    format_number,
    js_loose_equals,
    js_strict_equals,
    js_to_number,
    js_to_string,
    js_truthy,
    js_typeof,
    normalize_number,
    to_json,
)


class TestInferenceConfig(TestCase):
    def test_defaults(self):
        config = InferenceConfig()
        self.assertEqual(config.max_depth, 64)
        self.assertEqual(config.max_array_length, 1000)
        self.assertEqual(config.schema_namespace, "z")
        self.assertEqual(config.define_handler_names, ["defineHandler"])

    def test_from_dict_ignores_unknown_keys(self):
        config = InferenceConfig.from_dict({"max_depth": 5, "plugin_call_names": ["a", "b"], "unknown": 1})
        self.assertEqual(config.max_depth, 5)
        self.assertEqual(config.plugin_call_names, ["a", "b"])
        self.assertFalse(hasattr(config, "unknown"))

    def test_to_dict_round_trip(self):
        config = InferenceConfig(base_dir="/srv", fixture_namespace="fake")
        self.assertEqual(InferenceConfig.from_dict(config.to_dict()), config)

    def test_mock_write_options(self):
        options = MockWriteOptions()
        self.assertEqual(options.format, MockFormat.TS)
        self.assertEqual(MockFormat("json"), MockFormat.JSON)
        self.assertIsNone(options.ts_template)


class TestJsValues(TestCase):
    def test_to_string(self):
        self.assertEqual(js_to_string(None), "null")
        self.assertEqual(js_to_string(True), "true")
        self.assertEqual(js_to_string(1.5), "1.5")
        self.assertEqual(js_to_string(3.0), "3")
        self.assertEqual(js_to_string([1, None, "a"]), "1,,a")
        self.assertEqual(js_to_string({"a": 1}), "[object Object]")

    def test_format_number(self):
        self.assertEqual(format_number(math.inf), "Infinity")
        self.assertEqual(format_number(-math.inf), "-Infinity")
        self.assertEqual(format_number(math.nan), "NaN")
        self.assertEqual(format_number(0.1), "0.1")
        self.assertEqual(format_number(1e21), "1e+21")

    def test_to_number(self):
        self.assertEqual(js_to_number(" 12 "), 12)
        self.assertEqual(js_to_number("0x1f"), 31)
        self.assertEqual(js_to_number("1.5e1"), 15)
        self.assertEqual(js_to_number(""), 0)
        self.assertEqual(js_to_number(None), 0)
        self.assertEqual(js_to_number(False), 0)
        self.assertIsNone(js_to_number("abc"))
        self.assertIsNone(js_to_number([1]))

    def test_truthiness(self):
        for value in (None, False, 0, 0.0, ""):
            self.assertFalse(js_truthy(value), value)
        for value in (True, 1, "0", [], {}):
            self.assertTrue(js_truthy(value), value)

    def test_equality(self):
        self.assertTrue(js_loose_equals("1", 1))
        self.assertTrue(js_loose_equals(True, 1))
        self.assertFalse(js_loose_equals(None, 0))
        self.assertFalse(js_strict_equals(True, 1))
        self.assertIsNone(js_strict_equals([], []))
        self.assertIsNone(js_loose_equals({}, "x"))

    def test_typeof_and_numbers(self):
        self.assertEqual(js_typeof(True), "boolean")
        self.assertEqual(js_typeof(1), "number")
        self.assertEqual(js_typeof(None), "object")
        self.assertIsInstance(normalize_number(2.0), int)
        self.assertIsInstance(normalize_number(2.5), float)

    def test_to_json(self):
        self.assertEqual(to_json({"a": [1, "é"]}, indent=None), '{"a":[1,"é"]}')
        self.assertEqual(to_json([]), "[]")
