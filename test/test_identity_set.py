from unittest import TestCase

from pointerset import IdentityConfig, IdentitySet, TypeMismatch


class UnhashableWithBrokenEquality:
    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        raise ValueError()


class Unhashable(UnhashableWithBrokenEquality):
    def __eq__(self, other):
        return isinstance(other, Unhashable) and self.value == other.value


class Box:
    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return isinstance(other, Box) and self.value == other.value

    def __hash__(self):
        return hash(self.value)

    def __repr__(self):
        return f"Box({self.value!r})"


CASE_INSENSITIVE = IdentityConfig.custom(lambda s: hash(s.lower()), lambda a, b: a.lower() == b.lower())


class TestIdentitySet(TestCase):
    def test_unhashability(self):
        self.assertRaises(TypeError, lambda: hash(Unhashable(10)))

    def test_identity_set(self):
        u = Unhashable(10)
        u2 = Unhashable(11)
        objs = IdentitySet((10, u, u2), config=IdentityConfig.identity())
        self.assertIn(10, objs)
        self.assertIn(u, objs)
        self.assertIn(u2, objs)
        self.assertEqual(3, len(objs))
        objs.remove(u)
        self.assertIn(10, objs)
        self.assertNotIn(u, objs)
        self.assertIn(u2, objs)
        self.assertEqual(2, len(objs))

    def test_broken_equality(self):
        u = UnhashableWithBrokenEquality(10)
        u2 = UnhashableWithBrokenEquality(10)
        # identity never consults __eq__
        objs = IdentitySet((10, u, u2), config=IdentityConfig.identity())
        self.assertIn(10, objs)
        self.assertIn(u, objs)
        self.assertIn(u2, objs)
        self.assertEqual(3, len(objs))

    def test_identity_distinguishes_equal_values(self):
        a = Box(1)
        b = Box(1)
        by_identity = IdentitySet((a, b), config=IdentityConfig.identity())
        by_value = IdentitySet((a, b), config=IdentityConfig.value())
        self.assertEqual(2, len(by_identity))
        self.assertEqual(1, len(by_value))
        self.assertIs(a, by_value.get(b))
        self.assertNotIn(Box(1), by_identity)
        self.assertIn(Box(1), by_value)

    def test_default_config_is_value_equality(self):
        s = IdentitySet([1, 2, 2, 3])
        self.assertEqual(IdentityConfig.value(), s.config)
        self.assertEqual(3, len(s))

    def test_distinct_count(self):
        for xs in ([], [1], [1, 1, 1], [3, 1, 2, 3, 1], list("mississippi"), [0, 0.0, False, 1, 1.0, True]):
            with self.subTest(xs=xs):
                s = IdentitySet.from_iterable(xs, IdentityConfig.value())
                self.assertEqual(len(set(xs)), len(s))

    def test_first_duplicate_wins(self):
        s = IdentitySet(["Foo", "foo", "BAR", "bar"], config=CASE_INSENSITIVE)
        self.assertEqual(2, len(s))
        self.assertIn("FOO", s)
        self.assertEqual("Foo", s.get("FOO"))
        self.assertEqual("BAR", s.get("Bar"))
        s.add("FOO")
        self.assertEqual("Foo", s.get("foo"))

    def test_generator_source(self):
        s = IdentitySet((i % 3 for i in range(10)))
        self.assertEqual({0, 1, 2}, s)

    def test_with_config(self):
        s = IdentitySet.with_config(CASE_INSENSITIVE)
        self.assertEqual(0, len(s))
        self.assertIs(CASE_INSENSITIVE, s.config)

    def test_copy_empty(self):
        s = IdentitySet(["a", "b"], config=CASE_INSENSITIVE)
        empty = s.copy_empty()
        self.assertEqual(0, len(empty))
        self.assertIs(s.config, empty.config)
        self.assertEqual(2, len(s))

    def test_copy(self):
        s = IdentitySet(["a", "b"], config=CASE_INSENSITIVE)
        c = s.copy()
        c.add("C")
        self.assertIs(s.config, c.config)
        self.assertEqual(2, len(s))
        self.assertEqual(3, len(c))

    def test_discard_and_remove(self):
        s = IdentitySet([1, 2, 3])
        s.discard(4)
        self.assertEqual(3, len(s))
        s.discard(2)
        self.assertNotIn(2, s)
        with self.assertRaises(KeyError):
            s.remove(2)
        s.remove(3)
        self.assertEqual({1}, s)

    def test_discard_by_equal_element(self):
        s = IdentitySet(["Hello"], config=CASE_INSENSITIVE)
        s.discard("HELLO")
        self.assertEqual(0, len(s))

    def test_contains_incompatible_element(self):
        s = IdentitySet([1, 2])
        self.assertNotIn([1, 2], s)
        s.discard([1, 2])
        typed = IdentitySet([1, 2], config=IdentityConfig.value(element_type=int))
        self.assertNotIn("1", typed)
        self.assertIsNone(typed.get("1"))

    def test_clear(self):
        s = IdentitySet([1, 2, 3])
        s.clear()
        self.assertEqual(0, len(s))
        s.add(1)
        self.assertEqual({1}, s)

    def test_any_object(self):
        self.assertIsNone(IdentitySet().any_object())
        s = IdentitySet([1, 2])
        self.assertIn(s.any_object(), (1, 2))
        self.assertEqual([1, 2], sorted(s.all_objects()))

    def test_element_type_mismatch(self):
        config = IdentityConfig.value(element_type=int)
        with self.assertRaises(TypeMismatch):
            IdentitySet([1, 2, "three"], config=config)
        s = IdentitySet([1, 2], config=config)
        with self.assertRaises(TypeMismatch):
            s.add("three")
        self.assertEqual({1, 2}, s)

    def test_unhashable_under_value_equality(self):
        s = IdentitySet([1])
        with self.assertRaises(TypeMismatch) as cm:
            s.add(Unhashable(1))
        self.assertIsInstance(cm.exception, TypeError)
        self.assertEqual(1, len(s))

    def test_set_algebra_keeps_config(self):
        a = IdentitySet(["a", "B"], config=CASE_INSENSITIVE)
        b = IdentitySet(["A", "c"], config=CASE_INSENSITIVE)
        union = a | b
        self.assertIsInstance(union, IdentitySet)
        self.assertIs(CASE_INSENSITIVE, union.config)
        self.assertEqual(3, len(union))
        intersection = a & b
        self.assertIs(CASE_INSENSITIVE, intersection.config)
        self.assertEqual(1, len(intersection))
        self.assertIn("a", intersection)
        difference = a - b
        self.assertEqual(1, len(difference))
        self.assertIn("b", difference)
        self.assertEqual(2, len(a ^ b))
        self.assertTrue(a.isdisjoint(["x", "y"]))
        self.assertFalse(a.isdisjoint(["b"]))

    def test_in_place_set_algebra(self):
        s = IdentitySet([1, 2, 3])
        s |= [3, 4]
        self.assertEqual({1, 2, 3, 4}, s)
        s -= [1, 2]
        self.assertEqual({3, 4}, s)
        s &= [4, 5]
        self.assertEqual({4}, s)

    def test_equality(self):
        self.assertEqual(IdentitySet([1, 2, 3]), IdentitySet([3, 2, 1]))
        self.assertEqual(IdentitySet([1, 2, 3]), {1, 2, 3})
        self.assertNotEqual(IdentitySet([1, 2]), IdentitySet([1, 2, 3]))
        self.assertLessEqual(IdentitySet([1, 2]), IdentitySet([1, 2, 3]))

    def test_unhashable_set(self):
        with self.assertRaises(TypeError):
            hash(IdentitySet())

    def test_add_during_iteration(self):
        s = IdentitySet([1, 2, 3])
        visited = []
        for x in s:
            visited.append(x)
            s.add(x + 10)
        self.assertEqual([1, 2, 3], sorted(visited))
        self.assertEqual({1, 2, 3, 11, 12, 13}, s)

    def test_remove_during_iteration(self):
        s = IdentitySet([1, 2, 3, 4])
        visited = []
        for x in s:
            visited.append(x)
            s.clear()
        self.assertEqual(1, len(visited))
        self.assertEqual(0, len(s))

    def test_str_and_repr(self):
        self.assertEqual("{}", str(IdentitySet()))
        self.assertEqual("{1}", str(IdentitySet([1])))
        expected = "IdentitySet([1], config=IdentityConfig.value(storage=Storage.STRONG))"
        self.assertEqual(expected, repr(IdentitySet([1])))

    def test_value_equality_short_cuts_identity(self):
        nan = float('nan')
        s = IdentitySet([nan])
        s.add(nan)
        self.assertEqual(1, len(s))
        self.assertIn(nan, s)
        self.assertIs(nan, s.get(nan))
        s.discard(nan)
        self.assertEqual(0, len(s))
        self.assertNotIn(nan, s)
        self.assertEqual(len(set([nan, nan])), len(IdentitySet([nan, nan])))

    def test_method_documentation(self):
        self.assertIn("discard", IdentitySet.__doc__)
        for method in (IdentitySet.any, IdentitySet.all, IdentitySet.none):
            with self.subTest(method=method.__name__):
                self.assertIn(f"combinators.{method.__name__}", method.__doc__)
