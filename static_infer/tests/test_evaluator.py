"""
Expression evaluator tests.

Each case declares ``value`` in a small module and resolves it through the
module environment, the same way the call sites do.
"""

from __future__ import annotations

import json

from static_infer.config import InferenceConfig
from static_infer.evaluator import EXPR, FUNCTION, Evaluator, contains_unresolved, is_unresolved, module_environment


def evaluate(parser, source, name="value", config=None):
    tree = parser.parse(source)
    evaluator = Evaluator(config)
    value = evaluator.resolve_name(name, module_environment(tree.root), 0)
    return value, evaluator.warnings


class TestLiterals:
    def test_primitive_literals(self, parser):
        value, _ = evaluate(parser, "const value = { s: 'a', d: \"b\", n: 1.5, h: 0x10, t: true, f: false, z: null, u: undefined }")
        assert value == {"s": "a", "d": "b", "n": 1.5, "h": 16, "t": True, "f": False, "z": None, "u": None}

    def test_string_escapes(self, parser):
        value, _ = evaluate(parser, r"const value = 'line\nnext é \x41'")
        assert value == "line\nnext é A"

    def test_literal_object_round_trips_through_json(self, parser):
        source = "const value = { a: [1, 2, { b: 'c' }], d: { e: null, f: [true, false] } }"
        value, _ = evaluate(parser, source)
        assert json.loads(json.dumps(value)) == value
        assert value == {"a": [1, 2, {"b": "c"}], "d": {"e": None, "f": [True, False]}}

    def test_comments_are_ignored(self, parser):
        value, _ = evaluate(parser, "const value = { a: 1, /* note */ b: [2, // trailing\n 3] }")
        assert value == {"a": 1, "b": [2, 3]}

    def test_quoted_and_computed_keys(self, parser):
        value, _ = evaluate(parser, "const key = 'dyn'\nconst value = { 'x-y': 1, 2: 'two', [key]: true }")
        assert value == {"x-y": 1, "2": "two", "dyn": True}

    def test_spread(self, parser):
        value, _ = evaluate(parser, "const base = { a: 1, b: 2 }\nconst list = [1, 2]\nconst value = { ...base, b: 3, items: [0, ...list] }")
        assert value == {"a": 1, "b": 3, "items": [0, 1, 2]}


class TestTemplates:
    def test_interpolation(self, parser):
        value, _ = evaluate(parser, "const name = 'x'\nconst value = `hi ${name} ${1 + 1}`")
        assert value == "hi x 2"

    def test_object_span_is_json_stringified(self, parser):
        value, _ = evaluate(parser, "const value = `v=${ {a: 1} }`")
        assert value == 'v={"a":1}'

    def test_unresolved_span_makes_whole_template_unresolved(self, parser):
        value, _ = evaluate(parser, "const value = `id-${missing}`")
        assert is_unresolved(value)
        assert value == EXPR


class TestOperators:
    def test_arithmetic(self, parser):
        value, _ = evaluate(parser, "const value = [1 + 2, 7 - 10, 2 * 3, 7 / 2, 6 / 3, 7 % 3, -7 % 3, 'a' + 1, 1 + '2']")
        assert value == [3, -3, 6, 3.5, 2, 1, -1, "a1", "12"]

    def test_division_by_zero_is_unresolved(self, parser):
        value, _ = evaluate(parser, "const value = [1 / 0, 5 % 0]")
        assert all(is_unresolved(item) for item in value)

    def test_equality_and_comparison(self, parser):
        value, _ = evaluate(parser, "const value = [1 === 1, 1 === '1', 1 == '1', null == undefined, 'a' !== 'b', 2 > 1, 2 <= 1]")
        assert value == [True, False, True, True, True, True, False]

    def test_relational_needs_numbers(self, parser):
        value, _ = evaluate(parser, "const value = 'a' < 'b'")
        assert is_unresolved(value)

    def test_logical(self, parser):
        value, _ = evaluate(parser, "const value = [0 || 'x', 1 && 'y', null ?? 'z', 0 ?? 'w', '' && 'never']")
        assert value == ["x", "y", "z", 0, ""]

    def test_unary(self, parser):
        value, _ = evaluate(parser, "const value = [!0, !'a', -'3', +true, -(2 + 3)]")
        assert value == [True, False, -3, 1, -5]

    def test_unresolved_operand(self, parser):
        value, _ = evaluate(parser, "const value = [missing + 1, !missing, -missing, typeof 1, void 0]")
        assert all(is_unresolved(item) for item in value)

    def test_wrappers_are_transparent(self, parser):
        value, _ = evaluate(parser, "const x = 2\nconst value = (x as number)! * (3 satisfies number)")
        assert value == 6


class TestNamesAndAccess:
    def test_unbound_shorthand_is_named_marker(self, parser):
        first, _ = evaluate(parser, "const value = { foo }")
        second, _ = evaluate(parser, "const value = { foo }")
        assert is_unresolved(first["foo"])
        assert first["foo"] == "<foo>"
        assert first == second

    def test_identifiers_follow_const_bindings(self, parser):
        value, _ = evaluate(parser, "const a = 1\nconst b = a + 1\nconst value = { a, b, c: b * 10 }")
        assert value == {"a": 1, "b": 2, "c": 20}

    def test_self_reference_degrades_to_marker(self, parser):
        value, _ = evaluate(parser, "const value = [value]")
        assert value == ["<value>"]
        assert contains_unresolved(value)

    def test_reference_cycle(self, parser):
        value, _ = evaluate(parser, "const value = { a }\nconst a = b\nconst b = a")
        assert value == {"a": "<a>"}

    def test_member_and_subscript_access(self, parser):
        source = "const data = { list: [1, 2, 3], name: 'abc' }\nconst value = [data.list.length, data.list[1], data.name.length, data['name'], data.other]"
        value, _ = evaluate(parser, source)
        assert value[:4] == [3, 2, 3, "abc"]
        assert is_unresolved(value[4])

    def test_conditional_evaluates_live_branch_only(self, parser):
        value, _ = evaluate(parser, "const flag = true\nconst value = flag ? 'yes' : missing()")
        assert value == "yes"

    def test_unresolved_condition(self, parser):
        value, _ = evaluate(parser, "const value = missing ? 1 : 2")
        assert is_unresolved(value)

    def test_unknown_call_is_unresolved(self, parser):
        value, _ = evaluate(parser, "const value = { now: Date.now() }")
        assert value["now"] == EXPR


class TestFunctions:
    def test_arrow_expression_body(self, parser):
        value, _ = evaluate(parser, "const value = () => ({ a: 1 })")
        assert value == {"a": 1}

    def test_function_without_return_is_marker(self, parser):
        value, _ = evaluate(parser, "const value = function () { doSomething() }")
        assert value == FUNCTION


class TestDepthLimit:
    def test_deep_nesting_degrades_with_one_warning(self, parser):
        config = InferenceConfig(max_depth=3)
        value, warnings = evaluate(parser, "const value = [[[[[[1]]]]]]", config=config)
        assert contains_unresolved(value)
        assert len(warnings) == 1
        assert "max depth 3" in warnings[0]
