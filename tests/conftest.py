"""
Shared fixtures for the rail-cms test suite.
"""

import pytest

from rail_cms.fields import Integer, Relationship, Text
from rail_cms.testing import RailCMSTestClient, build_context, build_registry


def blog_lists(**overrides):
    """Two lists linked both ways: ``User.posts`` <-> ``Post.author``."""
    lists = {
        "User": {
            "fields": {
                "name": {"type": Text, "is_required": True},
                "email": {"type": Text},
                "posts": {"type": Relationship, "ref": "Post.author", "many": True},
            },
        },
        "Post": {
            "fields": {
                "title": {"type": Text},
                "views": {"type": Integer},
                "author": {"type": Relationship, "ref": "User.posts"},
            },
        },
    }
    for key, config in overrides.items():
        lists[key] = {**lists.get(key, {}), **config}
    return lists


@pytest.fixture
def make_registry():
    """Factory for blog registries; keyword arguments patch list configs by key."""

    def make(settings_overrides=None, **list_overrides):
        registry = build_registry(blog_lists(**list_overrides), **(settings_overrides or {}))
        registry.init_lists()
        return registry

    return make


@pytest.fixture
def registry(make_registry):
    return make_registry()


@pytest.fixture
def sudo_context(registry):
    return build_context(registry, skip_access_control=True)


@pytest.fixture
def context(registry):
    return build_context(registry)


@pytest.fixture
def client(registry):
    return RailCMSTestClient(registry)
