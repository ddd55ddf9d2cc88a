"""
Tests for picking the return value of a function.
"""

from __future__ import annotations

from static_infer.evaluator import ABSENT, Evaluator, is_unresolved, module_environment
from static_infer.syntax.nodes import declarators, named_children


def function_node(tree, name="fn"):
    for stmt in named_children(tree.root):
        for declared, value in declarators(stmt):
            if declared == name:
                return value
    raise AssertionError(f"{name} not declared")


def find_return(parser, source, param_values=None):
    tree = parser.parse(source)
    evaluator = Evaluator()
    return evaluator.returns.find_return(function_node(tree), module_environment(tree.root), param_values)


def test_last_object_return_wins(parser):
    source = """
const fn = (flag) => {
  if (flag) {
    return { early: true }
  }
  return { late: true }
}
"""
    assert find_return(parser, source) == {"late": True}


def test_object_preferred_over_later_scalar(parser):
    source = """
const fn = function () {
  if (x) return { shape: 1 }
  return null
}
"""
    assert find_return(parser, source) == {"shape": 1}


def test_identifier_return_resolves_through_body_consts(parser):
    source = """
const fn = () => {
  const payload = { id: 1, tags: ['a'] }
  return payload
}
"""
    assert find_return(parser, source) == {"id": 1, "tags": ["a"]}


def test_returns_of_nested_functions_are_ignored(parser):
    source = """
const fn = () => {
  const inner = () => { return { nested: true } }
  return 'outer'
}
"""
    assert find_return(parser, source) == "outer"


def test_parameter_shadows_outer_binding(parser):
    source = """
const id = 'outer'
const fn = (id) => ({ id })
"""
    value = find_return(parser, source)
    assert value == {"id": "<id>"}
    assert is_unresolved(value["id"])


def test_default_parameter_value(parser):
    assert find_return(parser, "const fn = (n = 2) => n * 3") == 6


def test_positional_parameter_values(parser):
    assert find_return(parser, "const fn = (a, b) => a + b", [1, 2]) == 3


def test_no_return_is_absent(parser):
    assert find_return(parser, "const fn = () => { console.log('x') }") is ABSENT


def test_method_definition_handler(parser):
    source = """
const fn = defineHandler({
  handler() {
    return { method: true }
  }
})
"""
    tree = parser.parse(source)
    evaluator = Evaluator()
    env = module_environment(tree.root)
    assert evaluator.resolve_name("fn", env, 0) == {"method": True}


def test_outer_const_does_not_see_handler_parameters(parser):
    source = """
const count = 3
const payload = { count }
const fn = (count) => payload
"""
    assert find_return(parser, source) == {"count": 3}


def test_body_const_sees_parameters(parser):
    source = """
const fn = (id) => {
  const payload = { id }
  return payload
}
"""
    assert find_return(parser, source, [7]) == {"id": 7}
