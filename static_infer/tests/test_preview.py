"""
Tests for default-export extraction and mock previews.
"""

from __future__ import annotations

import json
from unittest import TestCase

from static_infer.extract import build_preview, extract_default_export, parse_jsonc
from static_infer.extract.results import PARSED_EXPORT_DEFAULT, PARSED_JSON, RAW_JSON_FAILED, RAW_SOURCE


class TestExtractDefaultExport:
    def test_object_literal(self, parser):
        result = extract_default_export("export default { ok: true, count: 1 + 2 }", parser=parser)
        assert result.ok
        assert result.value == {"ok": True, "count": 3}
        assert result.meta == PARSED_EXPORT_DEFAULT

    def test_exported_identifier(self, parser):
        source = """
const base = { page: 1 }
const data = { ...base, items: [base.page, 2] }
export default data
"""
        result = extract_default_export(source, parser=parser)
        assert result.value == {"page": 1, "items": [1, 2]}

    def test_define_handler(self, parser):
        source = """
import { defineHandler } from 'mokup'

export default defineHandler((c) => {
  const user = { id: c.req.param('id'), name: 'Ada' }
  return user
})
"""
        result = extract_default_export(source, parser=parser)
        assert result.ok
        assert result.value == {"id": "<expr>", "name": "Ada"}

    def test_handler_parameter_does_not_leak_into_module_const(self, parser):
        source = """
const count = 3
const payload = { count }
const handler = (count) => payload
export default defineHandler({ handler })
"""
        result = extract_default_export(source, parser=parser)
        assert result.value == {"count": 3}

    def test_unknown_wrapper_with_function(self, parser):
        result = extract_default_export("export default wrap(() => ({ wrapped: true }))", parser=parser)
        assert result.value == {"wrapped": True}

    def test_scalar_export_is_not_reduced(self, parser):
        result = extract_default_export("export default 42", parser=parser)
        assert not result.ok

    def test_handler_without_return(self, parser):
        result = extract_default_export("export default defineHandler(() => { log() })", parser=parser)
        assert not result.ok

    def test_no_default_export(self, parser):
        assert not extract_default_export("export const a = 1", parser=parser).ok

    def test_without_parser(self):
        assert not extract_default_export("export default {}", parser=None).ok


class TestParseJsonc:
    def test_comments_and_trailing_commas(self, parser):
        raw = '{\n  // comment\n  "a": [1, 2,],\n  /* block */ "b": {"c": null},\n}'
        result = parse_jsonc(raw, parser=parser)
        assert result.ok
        assert result.value == {"a": [1, 2], "b": {"c": None}}

    def test_rejects_code(self, parser):
        assert not parse_jsonc('{"a": foo}', parser=parser).ok
        assert not parse_jsonc('{"a": 1}; alert(1)', parser=parser).ok

    def test_rejects_broken_text(self, parser):
        assert not parse_jsonc('{"a": ', parser=parser).ok


class TestBuildPreview:
    def test_script_file(self, parser):
        preview = build_preview("users.get.ts", "export default { ok: true }", parser=parser)
        assert preview.meta == PARSED_EXPORT_DEFAULT
        assert json.loads(preview.text) == {"ok": True}
        assert preview.text == '{\n  "ok": true\n}'

    def test_script_without_static_export(self, parser):
        raw = "export default handler"
        preview = build_preview("users.get.js", raw, parser=parser)
        assert preview.meta == RAW_SOURCE
        assert preview.text == raw

    def test_jsonc_file(self, parser):
        preview = build_preview("data.jsonc", '{"a": 1, // trailing\n}', parser=parser)
        assert preview.meta == PARSED_JSON
        assert json.loads(preview.text) == {"a": 1}

    def test_non_ascii_is_kept(self, parser):
        preview = build_preview("names.ts", "export default { name: 'Zoë' }", parser=parser)
        assert "Zoë" in preview.text


class TestBuildPreviewWithoutParser(TestCase):
    def test_plain_json(self):
        preview = build_preview("data.json", '{"a": [1, 2]}', parser=None)
        self.assertEqual(preview.meta, PARSED_JSON)
        self.assertEqual(json.loads(preview.text), {"a": [1, 2]})

    def test_broken_json(self):
        preview = build_preview("data.json", "{broken", parser=None)
        self.assertEqual(preview.meta, RAW_JSON_FAILED)
        self.assertEqual(preview.text, "{broken")

    def test_script_needs_parser(self):
        preview = build_preview("users.get.ts", "export default {}", parser=None)
        self.assertEqual(preview.meta, RAW_SOURCE)

    def test_other_extension(self):
        preview = build_preview("notes.txt", "hello", parser=None)
        self.assertEqual(preview.meta, RAW_SOURCE)
        self.assertEqual(preview.text, "hello")
