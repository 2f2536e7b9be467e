# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for TreeOptions, TreeBuilder and build_tree."""

from types import SimpleNamespace

import pytest

from genro_treestate import (
    MissingFieldError,
    NodeProperties,
    TreeBuilder,
    TreeOptions,
    TreeStateError,
    build_tree,
    default_properties,
)
from genro_treestate.store.query import walk


class TestTreeOptions:
    """Tests for TreeOptions."""

    def test_create(self):
        """Test required keys and defaults."""
        options = TreeOptions('id', 'name', 'employees')
        assert options.id_key == 'id'
        assert options.title_key == 'name'
        assert options.children_key == 'employees'
        assert options.initialize_properties is None
        assert options.initial_depth == -1
        assert options.initializer is default_properties

    @pytest.mark.parametrize('field', ['id_key', 'title_key', 'children_key'])
    def test_empty_key_raises(self, field):
        """Test keys must be non-empty strings."""
        kwargs = {'id_key': 'id', 'title_key': 'name', 'children_key': 'employees'}
        kwargs[field] = ''
        with pytest.raises(ValueError, match=field):
            TreeOptions(**kwargs)

    def test_initializer_not_callable_raises(self):
        """Test initialize_properties must be callable."""
        with pytest.raises(ValueError, match="callable"):
            TreeOptions('id', 'name', 'employees', initialize_properties=5)

    def test_initial_depth_must_be_int(self):
        """Test initial_depth rejects non-integers."""
        with pytest.raises(ValueError, match="initial_depth"):
            TreeOptions('id', 'name', 'employees', initial_depth='0')

    def test_resolve_from_kwargs(self):
        """Test resolve builds options from keyword arguments."""
        options = TreeOptions.resolve(id_key='id', title_key='name', children_key='kids')
        assert options == TreeOptions('id', 'name', 'kids')

    def test_resolve_overrides(self, options):
        """Test keyword arguments override an options instance."""
        resolved = TreeOptions.resolve(options, initial_depth=0)
        assert resolved.initial_depth == 0
        assert resolved.children_key == 'employees'
        assert options.initial_depth == -1

    def test_resolve_returns_same_instance(self, options):
        """Test resolve without overrides returns the given options."""
        assert TreeOptions.resolve(options) is options

    def test_resolve_nothing_raises(self):
        """Test resolve requires options or keys."""
        with pytest.raises(ValueError, match="required"):
            TreeOptions.resolve()


class TestBuildTree:
    """Tests for build_tree."""

    def test_end_to_end_example(self):
        """Test the single root / single child example."""
        roots = build_tree(
            [{'id': 1, 'name': 'Root 1', 'employees': [{'id': 2, 'name': 'Child 1', 'employees': []}]}],
            id_key='id', title_key='name', children_key='employees',
        )
        assert len(roots) == 1
        root = roots[0]
        assert root.id == 1
        assert root.title == 'Root 1'
        assert root.properties.level == 0
        assert len(root.children) == 1
        child = root.children[0]
        assert child.id == 2
        assert child.title == 'Child 1'
        assert child.properties.level == 1
        assert child.children == ()

    def test_one_node_per_record_in_order(self, records, options):
        """Test every record becomes a node, preserving source order."""
        roots = build_tree(records, options)
        assert [node.id for node in roots] == [1, 4]
        assert [node.id for node in walk(roots)] == [1, 2, 3, 4, 5, 6]
        assert [node.id for node in roots[0].children] == [2, 3]

    def test_levels_increase_by_one(self, records, options):
        """Test child level is parent level + 1, roots at 0."""
        roots = build_tree(records, options)

        def check(nodes, level):
            for node in nodes:
                assert node.properties.level == level
                if node.children:
                    check(node.children, level + 1)

        check(roots, 0)
        assert roots[1].children[0].children[0].properties.level == 2

    def test_default_properties(self, options):
        """Test the default flags are all off."""
        root = build_tree([{'id': 1, 'name': 'A'}], options)[0]
        assert root.properties == NodeProperties(level=0)

    def test_data_is_original_record(self, records, options):
        """Test the source record is kept verbatim."""
        roots = build_tree(records, options)
        assert roots[0].data is records[0]
        assert roots[0].children[1].data is records[0]['employees'][1]

    def test_missing_children_field_is_marker(self, options):
        """Test an absent children field gives children None."""
        root = build_tree([{'id': 1, 'name': 'A'}], options)[0]
        assert root.children is None
        assert root.is_loaded is False

    @pytest.mark.parametrize('value', [None, 'not a list', 3, {'id': 9}])
    def test_non_sequence_children_is_marker(self, options, value):
        """Test a children field that is not a list/tuple gives children None."""
        root = build_tree([{'id': 1, 'name': 'A', 'employees': value}], options)[0]
        assert root.children is None

    def test_tuple_children_are_followed(self, options):
        """Test tuples of records are treated like lists."""
        root = build_tree([{'id': 1, 'name': 'A', 'employees': ({'id': 2, 'name': 'B'},)}], options)[0]
        assert [child.id for child in root.children] == [2]

    def test_empty_input(self, options):
        """Test no records give an empty tree."""
        assert build_tree([], options) == ()

    def test_object_records(self, options):
        """Test records exposing fields as attributes."""
        record = SimpleNamespace(
            id='a', name='Alpha', employees=[SimpleNamespace(id='b', name='Beta')]
        )
        root = build_tree([record], options)[0]
        assert root.id == 'a'
        assert root.title == 'Alpha'
        assert root.children[0].id == 'b'
        assert root.children[0].children is None

    def test_missing_id_raises(self, options):
        """Test a record without the id field fails the build."""
        with pytest.raises(MissingFieldError, match="'id'") as excinfo:
            build_tree([{'name': 'A'}], options)
        assert excinfo.value.field == 'id'
        assert excinfo.value.record == {'name': 'A'}

    def test_missing_title_in_nested_record_raises(self, options):
        """Test a nested record without the title field fails the build."""
        with pytest.raises(MissingFieldError, match="'name'"):
            build_tree([{'id': 1, 'name': 'A', 'employees': [{'id': 2}]}], options)

    def test_missing_field_error_hierarchy(self):
        """Test MissingFieldError is a TreeStateError and a KeyError."""
        error = MissingFieldError('id', {})
        assert isinstance(error, TreeStateError)
        assert isinstance(error, KeyError)

    def test_custom_initializer(self):
        """Test a custom initializer receives record and depth."""
        calls = []

        def initialize(record, depth):
            calls.append((record['id'], depth))
            return {'level': depth + 1, 'is_open': depth < 0, 'color': record['name']}

        roots = build_tree(
            [{'id': 1, 'name': 'A', 'kids': [{'id': 2, 'name': 'B'}]}],
            id_key='id', title_key='name', children_key='kids',
            initialize_properties=initialize,
        )
        assert sorted(calls) == [(1, -1), (2, 0)]
        assert roots[0].properties.is_open is True
        assert roots[0].properties.get('color') == 'A'
        assert roots[0].children[0].properties.is_open is False
        assert roots[0].children[0].properties.level == 1

    def test_initial_depth(self, options):
        """Test initial_depth shifts every level."""
        roots = build_tree(
            [{'id': 1, 'name': 'A', 'employees': [{'id': 2, 'name': 'B'}]}],
            options, initial_depth=0,
        )
        assert roots[0].properties.level == 1
        assert roots[0].children[0].properties.level == 2


class TestTreeBuilder:
    """Tests for TreeBuilder."""

    def test_build_matches_build_tree(self, records, options):
        """Test the object form gives the same tree as build_tree."""
        assert TreeBuilder(options).build(records) == build_tree(records, options)

    def test_build_at_depth(self, options):
        """Test building a subtree at an explicit depth."""
        nodes = TreeBuilder(options).build([{'id': 7, 'name': 'G'}], depth=1)
        assert nodes[0].properties.level == 2


class TestNestingLimit:
    """Tests for the recursion bound on nesting depth."""

    def test_deep_records_raise_recursion_error(self, options):
        """Test nesting past the recursion limit fails with RecursionError."""
        record = {'id': 0, 'name': 'leaf'}
        for depth in range(1, 5000):
            record = {'id': depth, 'name': 'n', 'employees': [record]}
        with pytest.raises(RecursionError):
            build_tree([record], options)

    def test_moderate_depth_builds(self, options):
        """Test a hundred levels stay well within the limit."""
        record = {'id': 0, 'name': 'leaf'}
        for depth in range(1, 100):
            record = {'id': depth, 'name': 'n', 'employees': [record]}
        roots = build_tree([record], options)
        assert sum(1 for _ in walk(roots)) == 100
