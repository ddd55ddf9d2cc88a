"""
Mock-write planning.

Plans the mock files for a set of routes or named schemas without touching
the file system. File content comes from the jinja2 templates shipped in
``static_infer/templates`` unless the options carry template strings of
their own.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable, Iterable

import jinja2

from ..config import MockFormat, MockWriteOptions
from ..errors import TemplateRenderError
from ..utils import to_json
from .results import ConfigEntry, MockRoute, MockWritePlan, MockWriteResult
from .routes import route_to_file_path

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

BODY_METHODS = ("POST", "PUT", "PATCH")
BODY_LINE = "  const body = await c.req.json().catch(() => ({}))"
BODY_RETURN = ",\n    body"

_PARAM_RE = re.compile(r"\{([^}]+)\}")
_PARAM_SEGMENT_RE = re.compile(r"^\{[^}]+\}$")


def path_params(path: str) -> list[str]:
    """Names of the ``{param}`` segments of a route path."""
    return [name for name in _PARAM_RE.findall(path) if name]


def strip_path_params(path: str) -> str:
    """Drop ``{param}`` segments: ``/users/{id}/posts`` -> ``/users/posts``."""
    segments = [seg for seg in (path.strip() or "/").split("/") if seg and not _PARAM_SEGMENT_RE.match(seg)]
    return "/" + "/".join(segments)


def normalize_base_path(value: str) -> str:
    trimmed = value.strip().rstrip("/")
    if not trimmed:
        return "/schema"
    return trimmed if trimmed.startswith("/") else f"/{trimmed}"


class MockRenderer:
    """Renders mock file content from jinja2 templates."""

    def __init__(self, options: MockWriteOptions | None = None):
        """
        Initialize the renderer.

        Args:
            options: Mock write options (format, user templates, generation comment)
        """
        self.options = options or MockWriteOptions()
        self.format = MockFormat(self.options.format)
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )

    @property
    def user_template(self) -> str | None:
        return self.options.ts_template if self.format == MockFormat.TS else self.options.json_template

    def template_context(self, route: MockRoute, json_text: str = "", **extras: str) -> dict[str, Any]:
        """
        Build the variables a mock template sees.

        Args:
            route: Route the mock serves
            json_text: JSON payload (JSON mocks)
            **extras: body, bodyReturn, schemaName, schemaJson

        Returns:
            Dictionary of template variables
        """
        params = path_params(route.path)
        return {
            "method": route.method.upper(),
            "methodLower": route.method.lower(),
            "path": strip_path_params(route.path),
            "pathRaw": route.path,
            "params": to_json({name: f"{{{name}}}" for name in params}),
            "paramsList": ", ".join(params),
            "query": "{}",
            "body": extras.get("body", ""),
            "bodyReturn": extras.get("bodyReturn", ""),
            "schemaName": extras.get("schemaName", ""),
            "schemaJson": extras.get("schemaJson", ""),
            "json": json_text,
        }

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render the user template when one is set, else the packaged template.

        Raises:
            TemplateRenderError: If the template cannot be parsed or rendered
        """
        source = self.user_template
        try:
            template = self.jinja_env.from_string(source) if source else self.jinja_env.get_template(template_name)
            content = template.render(**context).rstrip() + "\n"
        except jinja2.TemplateError as e:
            raise TemplateRenderError(str(e), template_name="<user template>" if source else template_name) from e
        if self.format == MockFormat.TS and self.options.generation_comment:
            content = self.jinja_env.get_template("prefix.ts.jinja2").render(command=self.options.generation_command) + content
        return content

    def route_mock(self, route: MockRoute) -> str:
        if self.format == MockFormat.JSON:
            payload = {"ok": True, "method": route.method.upper(), "path": route.path}
            return self.render("route_mock.json.jinja2", self.template_context(route, to_json(payload)))
        with_body = route.method.upper() in BODY_METHODS
        context = self.template_context(route, body=BODY_LINE if with_body else "", bodyReturn=BODY_RETURN if with_body else "")
        return self.render("route_mock.ts.jinja2", context)

    def schema_mock(self, route: MockRoute, name: str, schema: Any) -> str:
        schema_json = to_json(schema)
        if self.format == MockFormat.JSON:
            payload = {"ok": True, "schema": name, "definition": schema}
            context = self.template_context(route, to_json(payload), schemaName=name, schemaJson=schema_json)
            return self.render("schema_mock.json.jinja2", context)
        context = self.template_context(route, schemaName=name, schemaJson=schema_json)
        return self.render("schema_mock.ts.jinja2", context)


def _plan(
    items: Iterable[tuple[MockRoute, str, Callable[[], str]]],
    entry: ConfigEntry,
    package_root: str,
    renderer: MockRenderer,
) -> MockWriteResult:
    result = MockWriteResult()
    seen: set[str] = set()
    for route, label, render in items:
        file_path = route_to_file_path(route, entry, package_root, renderer.format, result.warnings)
        if file_path is None:
            continue
        if file_path in seen:
            result.warnings.append(f"Duplicate mock path for {label}")
            continue
        seen.add(file_path)
        try:
            content = render()
        except TemplateRenderError as e:
            result.warnings.append(f"Failed to render template for {label}: {e}")
            continue
        result.files.append(MockWritePlan(path=file_path, content=content, format=renderer.format))
    logger.debug("planned %d mock file(s) under %s", len(result.files), entry.dir)
    return result


def plan_mock_writes_for_routes(
    routes: Iterable[MockRoute],
    entry: ConfigEntry,
    package_root: str,
    options: MockWriteOptions | None = None,
) -> MockWriteResult:
    """
    Plan one mock file per route.

    Args:
        routes: Routes to mock
        entry: Entry whose directory receives the files
        package_root: Directory the entry dir is relative to
        options: Mock write options

    Returns:
        MockWriteResult; duplicate paths and broken templates are warnings
    """
    renderer = MockRenderer(options)
    items = (
        (route, f"{route.method.upper()} {route.path}", lambda route=route: renderer.route_mock(route))
        for route in routes
    )
    return _plan(items, entry, package_root, renderer)


def plan_mock_writes_for_schemas(
    schemas: dict[str, Any],
    entry: ConfigEntry,
    package_root: str,
    options: MockWriteOptions | None = None,
) -> MockWriteResult:
    """
    Plan one mock file per named schema, served under ``options.base_path``.

    Args:
        schemas: Schemas by name
        entry: Entry whose directory receives the files
        package_root: Directory the entry dir is relative to
        options: Mock write options

    Returns:
        MockWriteResult; duplicate paths and broken templates are warnings
    """
    options = options or MockWriteOptions()
    renderer = MockRenderer(options)
    method = options.method.lower()
    base_path = normalize_base_path(options.base_path)
    items = []
    for name, schema in schemas.items():
        route = MockRoute(method=method, path=f"{base_path}/{name}")
        items.append((route, f"schema {name}", lambda route=route, name=name, schema=schema: renderer.schema_mock(route, name, schema)))
    return _plan(items, entry, package_root, renderer)
