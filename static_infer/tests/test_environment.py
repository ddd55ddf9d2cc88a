from unittest import TestCase

from static_infer.evaluator import EMPTY, Environment, ExprBinding, ValueBinding, module_environment


class TestEnvironment(TestCase):
    """Layered binding environments"""

    def test_lookup_walks_outward(self):
        outer = EMPTY.extend({"a": ValueBinding(1), "b": ValueBinding(2)})
        inner = outer.extend({"b": ValueBinding(20)})

        self.assertEqual(inner.lookup("a"), ValueBinding(1))
        self.assertEqual(inner.lookup("b"), ValueBinding(20))
        self.assertIsNone(inner.lookup("c"))

    def test_resolve_returns_declaring_layer(self):
        outer = EMPTY.extend({"a": ValueBinding(1)})
        inner = outer.extend({"b": ValueBinding(2)})

        self.assertEqual(inner.resolve("a"), (ValueBinding(1), outer))
        self.assertEqual(inner.resolve("b"), (ValueBinding(2), inner))
        self.assertIsNone(inner.resolve("c"))

    def test_extend_does_not_touch_parent(self):
        outer = EMPTY.extend({"a": ValueBinding(1)})
        outer.extend({"a": ValueBinding(2), "b": ValueBinding(3)})

        self.assertEqual(outer.lookup("a"), ValueBinding(1))
        self.assertNotIn("b", outer)

    def test_extend_with_nothing_returns_same_layer(self):
        env = EMPTY.extend({"a": ValueBinding(1)})
        self.assertIs(env.extend({}), env)

    def test_names_and_depth(self):
        env = Environment({"a": ValueBinding(1)}).extend({"b": ExprBinding(None)})

        self.assertEqual(env.names(), {"a", "b"})
        self.assertEqual(env.depth, 1)
        self.assertEqual(EMPTY.depth, 0)

    def test_layer_is_read_only(self):
        bindings = {"a": ValueBinding(1)}
        env = Environment(bindings)
        bindings["a"] = ValueBinding(2)

        self.assertEqual(env.lookup("a"), ValueBinding(1))


class TestModuleEnvironment:
    """Top-level const discovery"""

    def test_only_const_declarations_are_bound(self, parser):
        tree = parser.parse("const a = 1\nlet b = 2\nexport const c = 3\nvar d = 4\n")
        env = module_environment(tree.root)

        assert "a" in env
        assert "c" in env
        assert "b" not in env
        assert "d" not in env
        assert isinstance(env.lookup("a"), ExprBinding)
