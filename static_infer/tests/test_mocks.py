"""
Tests for mock-write planning and rendering.
"""

from __future__ import annotations

import json
from pathlib import Path

from static_infer.config import MockFormat, MockWriteOptions
from static_infer.extract import ConfigEntry, MockRenderer, MockRoute, plan_mock_writes_for_routes, plan_mock_writes_for_schemas
from static_infer.extract.mocks import normalize_base_path, path_params, strip_path_params

ENTRY = ConfigEntry(dir="mock", prefix="/api")

GET_MOCK = """import { defineHandler } from 'mokup'

export default defineHandler(async (c) => {
  return {
    ok: true,
    method: 'GET',
    path: '/api/users/{id}'
  }
})
"""

POST_MOCK = """import { defineHandler } from 'mokup'

export default defineHandler(async (c) => {
  const body = await c.req.json().catch(() => ({}))
  return {
    ok: true,
    method: 'POST',
    path: '/api/users',
    body
  }
})
"""


class TestRoutePlans:
    def test_typescript_mocks(self):
        routes = [MockRoute("get", "/api/users/{id}"), MockRoute("post", "/api/users")]
        result = plan_mock_writes_for_routes(routes, ENTRY, "/pkg")
        assert result.warnings == []
        assert [plan.path for plan in result.files] == [
            str(Path("/pkg/mock/users/[id].get.ts")),
            str(Path("/pkg/mock/users.post.ts")),
        ]
        assert result.files[0].content == GET_MOCK
        assert result.files[1].content == POST_MOCK
        assert all(plan.format == MockFormat.TS for plan in result.files)

    def test_json_mocks(self):
        options = MockWriteOptions(format=MockFormat.JSON)
        result = plan_mock_writes_for_routes([MockRoute("get", "/api/ping")], ENTRY, "/pkg", options)
        plan = result.files[0]
        assert plan.path == str(Path("/pkg/mock/ping.get.json"))
        assert plan.format == MockFormat.JSON
        assert json.loads(plan.content) == {"ok": True, "method": "GET", "path": "/api/ping"}

    def test_duplicate_paths(self):
        routes = [MockRoute("get", "/api/a"), MockRoute("get", "/a")]
        result = plan_mock_writes_for_routes(routes, ENTRY, "/pkg")
        assert len(result.files) == 1
        assert result.warnings == ["Duplicate mock path for GET /a"]

    def test_missing_entry_dir(self):
        result = plan_mock_writes_for_routes([MockRoute("get", "/a")], ConfigEntry(dir=""), "/pkg")
        assert result.files == []
        assert result.warnings == ["Missing entry dir for route GET /a"]

    def test_generation_comment(self):
        options = MockWriteOptions(generation_comment=True, generation_command="static_infer mocks types.ts")
        content = plan_mock_writes_for_routes([MockRoute("get", "/a")], ENTRY, "/pkg", options).files[0].content
        assert content.startswith("// Generated by static_infer mocks types.ts\n\nimport { defineHandler }")

    def test_no_generation_comment_in_json(self):
        options = MockWriteOptions(format=MockFormat.JSON, generation_comment=True)
        content = plan_mock_writes_for_routes([MockRoute("get", "/a")], ENTRY, "/pkg", options).files[0].content
        assert json.loads(content)["ok"] is True


class TestUserTemplates:
    def test_typescript_template(self):
        options = MockWriteOptions(ts_template="// {{ method }} {{ path }} ({{ paramsList }})\nexport default {{ params }}")
        result = plan_mock_writes_for_routes([MockRoute("get", "/api/users/{id}/posts/{postId}")], ENTRY, "/pkg", options)
        content = result.files[0].content
        assert content.startswith("// GET /api/users/posts (id, postId)\nexport default {")
        assert content.endswith("}\n")
        assert '"postId": "{postId}"' in content

    def test_json_template_for_schemas(self):
        options = MockWriteOptions(format=MockFormat.JSON, json_template='{"name": "{{ schemaName }}", "route": "{{ methodLower }} {{ pathRaw }}"}')
        result = plan_mock_writes_for_schemas({"User": {"type": "object"}}, ConfigEntry(dir="mock"), "/pkg", options)
        assert json.loads(result.files[0].content) == {"name": "User", "route": "get /schema/User"}

    def test_broken_template(self):
        options = MockWriteOptions(ts_template="{% if %}")
        result = plan_mock_writes_for_routes([MockRoute("get", "/api/a")], ENTRY, "/pkg", options)
        assert result.files == []
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("Failed to render template for GET /api/a: ")


class TestSchemaPlans:
    def test_typescript_schema_mocks(self):
        schemas = {"User": {"type": "object", "properties": {"id": {"type": "string"}}}, "Id": {"type": "string"}}
        result = plan_mock_writes_for_schemas(schemas, ConfigEntry(dir="mock"), "/pkg")
        assert [plan.path for plan in result.files] == [
            str(Path("/pkg/mock/schema/User.get.ts")),
            str(Path("/pkg/mock/schema/Id.get.ts")),
        ]
        content = result.files[1].content
        assert 'const schema = {\n  "type": "string"\n};' in content
        assert "schema: 'Id'," in content
        assert "definition: schema," in content

    def test_method_and_base_path(self):
        options = MockWriteOptions(method="POST", base_path="types/")
        result = plan_mock_writes_for_schemas({"A": {}}, ConfigEntry(dir="mock"), "/pkg", options)
        assert result.files[0].path == str(Path("/pkg/mock/types/A.post.ts"))

    def test_json_schema_mock(self):
        options = MockWriteOptions(format=MockFormat.JSON)
        result = plan_mock_writes_for_schemas({"A": {"type": "null"}}, ConfigEntry(dir="mock"), "/pkg", options)
        assert json.loads(result.files[0].content) == {"ok": True, "schema": "A", "definition": {"type": "null"}}


class TestRendererHelpers:
    def test_template_context(self):
        context = MockRenderer().template_context(MockRoute("patch", "/users/{id}"), "{}")
        assert context["method"] == "PATCH"
        assert context["methodLower"] == "patch"
        assert context["path"] == "/users"
        assert context["pathRaw"] == "/users/{id}"
        assert json.loads(context["params"]) == {"id": "{id}"}
        assert context["query"] == "{}"
        assert context["json"] == "{}"

    def test_path_helpers(self):
        assert path_params("/a/{b}/c/{d}") == ["b", "d"]
        assert strip_path_params("/{id}") == "/"
        assert normalize_base_path("  ") == "/schema"
        assert normalize_base_path("/types/") == "/types"
