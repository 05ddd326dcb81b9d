"""
Unit tests for the in-memory storage adapter.
"""

import pytest

pytestmark = pytest.mark.unit


@pytest.fixture
def posts(registry):
    return registry.get_list_by_key("Post").adapter


@pytest.fixture
def users(registry):
    return registry.get_list_by_key("User").adapter


async def seed_posts(posts):
    for title, views in (("Alpha", 10), ("beta", 5), ("Gamma", None), ("Delta", 20)):
        await posts.create({"title": title, "views": views})


class TestMemoryListAdapter:
    @pytest.mark.asyncio
    async def test_create_assigns_sequential_string_ids(self, posts):
        first = await posts.create({"title": "One"})
        second = await posts.create({"title": "Two"})

        assert first == {"id": "1", "title": "One"}
        assert second["id"] == "2"

    @pytest.mark.asyncio
    async def test_returned_items_are_copies(self, posts):
        created = await posts.create({"title": "One"})
        created["title"] = "Changed"

        items = await posts.items_query({})
        assert items[0]["title"] == "One"

    @pytest.mark.asyncio
    async def test_field_conditions(self, posts):
        await seed_posts(posts)

        contains = await posts.items_query({"where": {"title_contains": "ta"}})
        ranged = await posts.items_query({"where": {"views_gte": 10}})
        excluded = await posts.items_query({"where": {"id_not_in": ["1", "2"]}})

        assert [item["title"] for item in contains] == ["beta", "Delta"]
        assert [item["title"] for item in ranged] == ["Alpha", "Delta"]
        assert [item["id"] for item in excluded] == ["3", "4"]

    @pytest.mark.asyncio
    async def test_and_or_clauses(self, posts):
        await seed_posts(posts)

        items = await posts.items_query(
            {
                "where": {
                    "OR": [{"title": "Alpha"}, {"views_lt": 10}],
                    "AND": [{"id_not": "1"}],
                }
            }
        )

        assert [item["title"] for item in items] == ["beta"]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, posts):
        await seed_posts(posts)

        items = await posts.items_query({"search": "GAM"})

        assert [item["title"] for item in items] == ["Gamma"]

    @pytest.mark.asyncio
    async def test_order_skip_and_first(self, posts):
        await seed_posts(posts)

        items = await posts.items_query({"order_by": "views_DESC", "skip": 1, "first": 2})

        assert [item["title"] for item in items] == ["Delta", "Alpha"]

    @pytest.mark.asyncio
    async def test_meta_returns_count(self, posts):
        await seed_posts(posts)

        assert await posts.items_query({"where": {"views_gt": 1}}, meta=True) == {"count": 3}

    @pytest.mark.asyncio
    async def test_unknown_filter_raises(self, posts):
        with pytest.raises(ValueError):
            await posts.items_query({"where": {"colour": "red"}})

    @pytest.mark.asyncio
    async def test_update_and_delete(self, posts):
        created = await posts.create({"title": "One", "views": 1})

        updated = await posts.update(created["id"], {"views": 2, "id": "99"})
        deleted = await posts.delete(created["id"])

        assert updated == {"id": "1", "title": "One", "views": 2}
        assert deleted["views"] == 2
        assert await posts.items_query({}) == []
        assert await posts.delete(created["id"]) is None


class TestRelationshipConditions:
    @pytest.mark.asyncio
    async def test_to_many_conditions(self, posts, users):
        await seed_posts(posts)
        await users.create({"name": "Ann", "posts": ["1", "2"]})
        await users.create({"name": "Bob", "posts": ["4"]})
        await users.create({"name": "Cid", "posts": []})

        some = await users.items_query({"where": {"posts_some": {"views_lt": 10}}})
        every = await users.items_query({"where": {"posts_every": {"views_gte": 10}}})
        none = await users.items_query({"where": {"posts_none": {"title": "Delta"}}})

        assert [user["name"] for user in some] == ["Ann"]
        assert [user["name"] for user in every] == ["Bob", "Cid"]
        assert [user["name"] for user in none] == ["Ann", "Cid"]

    @pytest.mark.asyncio
    async def test_to_one_conditions(self, posts, users):
        await users.create({"name": "Ann"})
        await posts.create({"title": "Owned", "author": "1"})
        await posts.create({"title": "Orphan", "author": None})

        by_author = await posts.items_query({"where": {"author": {"name": "Ann"}}})
        orphans = await posts.items_query({"where": {"author_is_null": True}})

        assert [post["title"] for post in by_author] == ["Owned"]
        assert [post["title"] for post in orphans] == ["Orphan"]
