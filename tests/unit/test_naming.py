"""
Unit tests for label and GraphQL name derivation.
"""

import pytest

from rail_cms.core.exceptions import ListConfigurationError
from rail_cms.core.naming import (
    derive_list_names,
    key_to_label,
    label_to_path,
    pluralize,
    prevent_invalid_underscore_prefix,
    singularize,
)

pytestmark = pytest.mark.unit


class TestInflection:
    @pytest.mark.parametrize(
        "singular,plural",
        [
            ("User", "Users"),
            ("Category", "Categories"),
            ("Person", "People"),
            ("Address", "Addresses"),
            ("Blog Post", "Blog Posts"),
            ("Status", "Statuses"),
            ("Axis", "Axes"),
            ("Movie", "Movies"),
            ("Blog Person", "Blog People"),
        ],
    )
    def test_pluralize_and_singularize(self, singular, plural):
        assert pluralize(singular) == plural
        assert singularize(plural) == singular

    def test_uncountable_words_are_unchanged(self):
        assert pluralize("Sheep") == "Sheep"
        assert singularize("News") == "News"


class TestLabels:
    def test_key_to_label_splits_camel_case(self):
        assert key_to_label("BlogPost") == "Blog Post"

    def test_key_to_label_keeps_aux_prefix(self):
        assert key_to_label("_Tag_posts") == "_Tag Posts"

    def test_label_to_path(self):
        assert label_to_path("Blog Posts") == "blog-posts"

    def test_double_underscore_prefix_is_reduced(self):
        assert prevent_invalid_underscore_prefix("__TagsMeta") == "_TagsMeta"
        assert prevent_invalid_underscore_prefix("_UsersMeta") == "_UsersMeta"


class TestDeriveListNames:
    def test_names_for_simple_key(self):
        labels, names = derive_list_names("User")

        assert labels == {
            "label": "Users",
            "singular": "User",
            "plural": "Users",
            "path": "users",
        }
        assert names.output_type_name == "User"
        assert names.item_query_name == "User"
        assert names.list_query_name == "allUsers"
        assert names.list_query_meta_name == "_allUsersMeta"
        assert names.list_meta_name == "_UsersMeta"
        assert names.create_mutation_name == "createUser"
        assert names.create_many_mutation_name == "createManyUsers"
        assert names.update_many_mutation_name == "updateManyUsers"
        assert names.delete_many_mutation_name == "deleteManyUsers"
        assert names.where_input_name == "UserWhereInput"
        assert names.where_unique_input_name == "UserWhereUniqueInput"
        assert names.create_many_input_name == "UsersCreateInput"
        assert names.update_many_input_name == "UsersUpdateInput"
        assert names.relate_to_many_input_name == "UserRelateToManyInput"

    def test_names_for_multi_word_key(self):
        labels, names = derive_list_names("BlogPost")

        assert labels["path"] == "blog-posts"
        assert names.item_query_name == "BlogPost"
        assert names.list_query_name == "allBlogPosts"

    def test_irregular_plural_key_is_accepted(self):
        labels, names = derive_list_names("Axis")

        assert labels["plural"] == "Axes"
        assert names.list_query_name == "allAxes"
        assert names.create_many_mutation_name == "createManyAxes"

    def test_derivation_is_deterministic(self):
        assert derive_list_names("Category") == derive_list_names("Category")

    def test_ambiguous_plural_is_rejected(self):
        with pytest.raises(ListConfigurationError) as exc_info:
            derive_list_names("Sheep")

        assert exc_info.value.list_key == "Sheep"
        assert "ambiguous" in str(exc_info.value)

    def test_plural_key_is_rejected(self):
        with pytest.raises(ListConfigurationError):
            derive_list_names("Users")

    def test_plural_override_disambiguates(self):
        labels, names = derive_list_names("Sheep", plural="Flock")

        assert labels["plural"] == "Flock"
        assert names.item_query_name == "Sheep"
        assert names.list_query_name == "allFlock"

    def test_query_name_overrides(self):
        _, names = derive_list_names("Staff", item_query_name="Member", list_query_name="Members")

        assert names.item_query_name == "Member"
        assert names.list_query_name == "allMembers"
        assert names.output_type_name == "Staff"

    def test_colliding_item_and_list_names_are_rejected(self):
        with pytest.raises(ListConfigurationError):
            derive_list_names("User", item_query_name="Users")

    def test_as_dict_uses_camel_case_keys(self):
        _, names = derive_list_names("User")
        as_dict = names.as_dict()

        assert as_dict["listQueryName"] == "allUsers"
        assert as_dict["createManyMutationName"] == "createManyUsers"
