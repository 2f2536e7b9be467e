# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for TreeState tests."""

import pytest

from genro_treestate import TreeOptions, TreeStore


@pytest.fixture
def records():
    """Two roots, the second one three levels deep."""
    return [
        {
            'id': 1,
            'name': 'Root 1',
            'employees': [
                {'id': 2, 'name': 'Child 1', 'employees': []},
                {'id': 3, 'name': 'Child 2', 'employees': []},
            ],
        },
        {
            'id': 4,
            'name': 'Root 2',
            'employees': [
                {
                    'id': 5,
                    'name': 'Child 3',
                    'employees': [{'id': 6, 'name': 'Subchild 1', 'employees': []}],
                },
            ],
        },
    ]


@pytest.fixture
def options():
    return TreeOptions(id_key='id', title_key='name', children_key='employees')


@pytest.fixture
def store(records, options):
    return TreeStore(records, options)
