"""
Tests for the text scanner used when no syntax tree is available.
"""

from __future__ import annotations

from unittest import TestCase

from static_infer.extract import ConfigEntry, scan_entries
from static_infer.extract.fallback import (
    NO_ENTRIES_OPTION,
    NO_USABLE_DIR,
    extract_first_arg,
    extract_string_literals,
    extract_value_slice,
    find_matching,
    find_string_end,
    parse_boolean_literal,
    parse_mode_literal,
    split_top_level_items,
)


class TestScanEntries(TestCase):
    def test_entries_assignment(self):
        result = scan_entries("export default { entries: [{dir:'mock', prefix:'/api'}, {dir:'mocks/user'}] }")
        self.assertEqual(result.entries, [ConfigEntry(dir="mock", prefix="/api"), ConfigEntry(dir="mocks/user")])
        self.assertEqual(result.warnings, [])

    def test_plugin_options(self):
        content = """
export default defineConfig({
  plugins: [
    mokup({
      entries: [{ dir: 'mock', watch: false, mode: 'server' }],
    }),
  ],
})
"""
        result = scan_entries(content)
        self.assertEqual(result.entries, [ConfigEntry(dir="mock", watch=False, mode="server")])

    def test_plugin_options_without_entries_key(self):
        result = scan_entries("plugins: [mokup({ dir: ['a', \"b\"], prefix: 'api' })]")
        self.assertEqual(result.entries, [ConfigEntry(dir="a", prefix="api"), ConfigEntry(dir="b", prefix="api")])

    def test_string_entry(self):
        result = scan_entries("const config = { entries: 'mock' }")
        self.assertEqual(result.entries, [ConfigEntry(dir="mock")])

    def test_delimiters_inside_strings(self):
        result = scan_entries("entries: [{ dir: 'a,b' }, { dir: \"c]\" }]")
        self.assertEqual([entry.dir for entry in result.entries], ["a,b", "c]"])

    def test_nested_array(self):
        result = scan_entries("entries: [['mock']]")
        self.assertEqual(result.entries, [])
        self.assertEqual(result.warnings, ["Nested array entries are not supported, skipping.", NO_USABLE_DIR])

    def test_non_literal_array_item(self):
        result = scan_entries("entries: ['mock', other]")
        self.assertEqual(result.entries, [ConfigEntry(dir="mock")])
        self.assertEqual(result.warnings, ["Array entry is not a string/object literal, skipping."])

    def test_object_without_dir(self):
        result = scan_entries("entries: { prefix: '/api' }")
        self.assertEqual(result.warnings, ["Entry object has no string dir literal, skipping.", NO_USABLE_DIR])

    def test_no_entries_option(self):
        result = scan_entries("export default defineConfig({ server: { port: 3000 } })", warnings=["earlier"])
        self.assertEqual(result.entries, [])
        self.assertEqual(result.warnings, ["earlier", NO_ENTRIES_OPTION])

    def test_custom_plugin_names(self):
        result = scan_entries("mockServer({ entries: 'm' })", plugin_names=["mockServer"])
        self.assertEqual(result.entries, [ConfigEntry(dir="m")])


class TestScanHelpers(TestCase):
    def test_find_matching(self):
        self.assertEqual(find_matching("(a(b)c)", 0, ")"), 6)
        self.assertEqual(find_matching("(')', x)", 0, ")"), 7)
        self.assertEqual(find_matching("(unclosed", 0, ")"), -1)

    def test_find_string_end(self):
        self.assertEqual(find_string_end("'a\\'b' rest", 0), 5)
        self.assertEqual(find_string_end("'open", 0), -1)

    def test_split_top_level_items(self):
        self.assertEqual(split_top_level_items("a, {b: 1, c: 2}, 'x,y',"), ["a", "{b: 1, c: 2}", "'x,y'"])

    def test_extract_first_arg(self):
        self.assertEqual(extract_first_arg("{a: 1}, other"), "{a: 1}")
        self.assertIsNone(extract_first_arg(""))

    def test_extract_value_slice(self):
        literal = "dir: ['a', 'b'], prefix: '/p', nested: { x: 1 }"
        self.assertEqual(extract_value_slice(literal, "dir"), "['a', 'b']")
        self.assertEqual(extract_value_slice(literal, "nested"), "{ x: 1 }")
        self.assertIsNone(extract_value_slice(literal, "mode"))

    def test_literal_parsers(self):
        self.assertEqual(extract_string_literals("['a', \"b\", `c`]"), ["a", "b", "c"])
        self.assertEqual(extract_string_literals(None), [])
        self.assertTrue(parse_boolean_literal("true"))
        self.assertFalse(parse_boolean_literal("false"))
        self.assertIsNone(parse_boolean_literal("maybe"))
        self.assertEqual(parse_mode_literal("'sw'"), "sw")
        self.assertIsNone(parse_mode_literal("'edge'"))
