import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xsd2codemirror.common import CycleError
from xsd2codemirror.dependency_resolver import GroupCache, close_group_dependencies
from xsd2codemirror.simplexml import QualifiedName


def qn(name):
    return QualifiedName('', name)


class TestDependencyResolver(unittest.TestCase):

    def test_nested_children_keep_declaration_order(self):
        cache = GroupCache()
        outer = cache.create('outer')
        inner = cache.create('inner')
        outer.add_child(qn('a'))
        outer.add_dependency(inner)
        outer.add_child(qn('d'))
        inner.add_child(qn('b'))
        inner.add_child(qn('a'))
        inner.add_child(qn('c'))

        close_group_dependencies(cache)

        self.assertEqual(inner.children, [qn('b'), qn('a'), qn('c')])
        self.assertEqual(outer.children, [qn('a'), qn('b'), qn('c'), qn('d')])

    def test_diamond_is_resolved_once(self):
        cache = GroupCache()
        left = cache.create('left')
        right = cache.create('right')
        shared = cache.create('shared')
        top = cache.create('top')
        shared.add_child(qn('x'))
        left.add_dependency(shared)
        right.add_dependency(shared)
        right.add_child(qn('y'))
        top.add_dependency(left)
        top.add_dependency(right)

        close_group_dependencies(cache)

        self.assertIs(cache.get('shared'), shared)
        self.assertEqual(left.children, [qn('x')])
        self.assertEqual(right.children, [qn('x'), qn('y')])
        self.assertEqual(top.children, [qn('x'), qn('y')])
        self.assertTrue(all(group_set.is_resolved for group_set in cache))

    def test_deep_chain_closes(self):
        cache = GroupCache()
        chain = [cache.create(f'g{i}') for i in range(60)]
        for i, group_set in enumerate(chain):
            group_set.add_child(qn(f'e{i}'))
            if i + 1 < len(chain):
                group_set.add_dependency(chain[i + 1])

        close_group_dependencies(cache)

        self.assertEqual(chain[0].children, [qn(f'e{i}') for i in range(60)])

    def test_round_bound_reports_unresolved_groups(self):
        cache = GroupCache()
        chain = [cache.create(f'g{i}') for i in range(5)]
        for i in range(4):
            chain[i].add_dependency(chain[i + 1])

        with self.assertRaises(CycleError) as context:
            close_group_dependencies(cache, str, max_rounds=2)
        self.assertEqual(context.exception.groups, ['g0', 'g1'])

    def test_mutual_cycle(self):
        cache = GroupCache()
        first = cache.create('first')
        second = cache.create('second')
        free = cache.create('free')
        first.add_child(qn('a'))
        first.add_dependency(second)
        second.add_dependency(first)
        free.add_child(qn('b'))

        with self.assertRaises(CycleError) as context:
            close_group_dependencies(cache, lambda group: f'Group({group})')
        self.assertEqual(context.exception.groups, ['Group(first)', 'Group(second)'])
        self.assertIn('Group(first), Group(second)', str(context.exception))
        self.assertTrue(free.is_resolved)

    def test_self_reference_is_a_cycle(self):
        cache = GroupCache()
        group_set = cache.create('self')
        group_set.add_dependency(group_set)
        with self.assertRaises(CycleError):
            close_group_dependencies(cache, str)

    def test_resolved_set_is_frozen(self):
        cache = GroupCache()
        group_set = cache.create('g')
        group_set.add_child(qn('a'))
        close_group_dependencies(cache)
        with self.assertRaises(RuntimeError):
            group_set.add_child(qn('b'))
        self.assertEqual(group_set.children, [qn('a')])

    def test_children_of_unresolved_set(self):
        cache = GroupCache()
        group_set = cache.create('g')
        with self.assertRaises(RuntimeError):
            _ = group_set.children

    def test_group_cached_only_once(self):
        cache = GroupCache()
        cache.create('g')
        with self.assertRaises(KeyError):
            cache.create('g')
        self.assertIsNone(cache.get('other'))
        self.assertEqual(len(cache), 1)


if __name__ == '__main__':
    unittest.main()
