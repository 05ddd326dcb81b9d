"""
Unit tests for list construction, field initialisation and admin metadata.
"""

import logging

import pytest

from rail_cms.adapters.memory import MemoryAdapter
from rail_cms.core.exceptions import ListConfigurationError
from rail_cms.core.registry import ListRegistry
from rail_cms.fields import (
    FieldType,
    Implementation,
    Integer,
    Relationship,
    Text,
    TextImplementation,
)
from rail_cms.testing import build_registry

pytestmark = pytest.mark.unit


class NoPrimaryKeyAdapter(MemoryAdapter):
    get_default_primary_key_config = None


class TestListConstruction:
    def test_unknown_config_key_is_rejected(self):
        with pytest.raises(ListConfigurationError) as exc_info:
            build_registry({"User": {"fields": {}, "colour": "red"}})

        assert "colour" in str(exc_info.value)

    def test_duplicate_list_key_is_rejected(self):
        registry = build_registry({"User": {"fields": {}}})

        with pytest.raises(ListConfigurationError):
            registry.create_list("User", {"fields": {}})

    def test_max_results_below_one_is_rejected(self):
        with pytest.raises(ListConfigurationError):
            build_registry({"User": {"fields": {}, "query_limits": {"max_results": 0}}})

    def test_missing_max_results_is_unlimited(self):
        registry = build_registry({"User": {"fields": {}}})

        assert registry.get_list_by_key("User").query_limits["max_results"] == float("inf")

    def test_malformed_cache_hint_is_rejected(self):
        with pytest.raises(ListConfigurationError):
            build_registry({"User": {"fields": {}, "cache_hint": 30}})

    def test_ambiguous_list_key_is_rejected(self):
        with pytest.raises(ListConfigurationError):
            build_registry({"Sheep": {"fields": {}}})

    def test_field_types_are_registered(self):
        registry = build_registry({"User": {"fields": {"name": {"type": Text}, "age": Integer}}})

        assert {Text, Integer} <= registry.registered_types


class TestInitFields:
    def test_id_field_is_implicit_and_first(self):
        registry = build_registry({"User": {"fields": {"name": {"type": Text}}}})
        users = registry.get_list_by_key("User")

        users.init_fields()

        assert list(users.fields_by_path) == ["id", "name"]
        assert users.get_primary_key().is_primary_key
        assert users.get_field_by_path("missing") is None

    def test_init_fields_runs_once(self):
        registry = build_registry({"User": {"fields": {"name": {"type": Text}}}})
        users = registry.get_list_by_key("User")

        users.init_fields()
        fields = users.fields
        users.init_fields()

        assert users.fields is fields

    def test_type_by_name(self):
        registry = build_registry({"User": {"fields": {"name": {"type": "Text"}}}})
        registry.init_lists()

        assert isinstance(registry.get_list_by_key("User").fields_by_path["name"], TextImplementation)

    def test_native_type_is_mapped_with_warning(self, caplog):
        registry = build_registry({"User": {"fields": {"name": str}}})

        with caplog.at_level(logging.WARNING, logger="rail_cms.lists.base"):
            registry.init_lists()

        assert isinstance(registry.get_list_by_key("User").fields_by_path["name"], TextImplementation)
        assert "native Python type 'str'" in caplog.text

    def test_missing_type_is_rejected(self):
        registry = build_registry({"User": {"fields": {"name": {"label": "Name"}}}})

        with pytest.raises(ListConfigurationError) as exc_info:
            registry.init_lists()

        assert "User.name" in str(exc_info.value)

    def test_underscore_field_name_is_rejected(self):
        registry = build_registry({"User": {"fields": {"_secret": {"type": Text}}}})

        with pytest.raises(ListConfigurationError):
            registry.init_lists()

    def test_type_without_adapters_is_rejected(self):
        bare = FieldType(type="Bare", implementation=Implementation)
        registry = build_registry({"User": {"fields": {"name": {"type": bare}}}})

        with pytest.raises(ListConfigurationError) as exc_info:
            registry.init_lists()

        assert "doesn't define any adapters" in str(exc_info.value)

    def test_type_unsupported_by_adapter_is_rejected(self):
        sql_only = FieldType(type="SqlText", implementation=TextImplementation, adapters={"sql": object})
        registry = build_registry({"User": {"fields": {"name": {"type": sql_only}}}})

        with pytest.raises(ListConfigurationError) as exc_info:
            registry.init_lists()

        assert 'does not support field type "SqlText"' in str(exc_info.value)

    def test_adapter_without_default_primary_key_is_rejected(self):
        registry = ListRegistry(adapter=NoPrimaryKeyAdapter())
        registry.create_list("User", {"fields": {"name": {"type": Text}}})

        with pytest.raises(ListConfigurationError) as exc_info:
            registry.init_lists()

        assert "get_default_primary_key_config" in str(exc_info.value)

    def test_relationship_without_ref_is_rejected(self):
        registry = build_registry({"User": {"fields": {"friend": {"type": Relationship}}}})

        with pytest.raises(ListConfigurationError):
            registry.init_lists()

    def test_relationship_to_unknown_list_fails_schema_build(self):
        registry = build_registry({"User": {"fields": {"team": {"type": Relationship, "ref": "Team"}}}})

        with pytest.raises(ListConfigurationError) as exc_info:
            registry.get_type_defs()

        assert "Team" in str(exc_info.value)


class TestAuxLists:
    def test_aux_list_mirrors_access_as_booleans(self, registry):
        users = registry.get_list_by_key("User")
        users.access["public"] = {**users.access["public"], "read": lambda **kwargs: True, "delete": False}

        aux = users.create_aux_list("_UserTag", {"fields": {"_order": {"type": Integer}}})
        aux.init_fields()

        assert aux.is_aux_list
        assert aux.access["public"]["read"] is True
        assert aux.access["public"]["delete"] is False
        assert "_order" in aux.fields_by_path
        assert registry.aux_lists["_UserTag"] is aux
        assert users.create_aux_list("_UserTag", {}) is aux


class TestAdminMeta:
    def test_admin_meta(self, registry):
        meta = registry.get_list_by_key("User").get_admin_meta("public")

        assert meta["key"] == "User"
        assert meta["access"] == {
            "create": True,
            "read": True,
            "update": True,
            "delete": True,
            "auth": True,
        }
        assert (meta["label"], meta["singular"], meta["plural"], meta["path"]) == (
            "Users",
            "User",
            "Users",
            "users",
        )
        assert meta["gqlNames"]["listQueryName"] == "allUsers"
        assert [field["path"] for field in meta["fields"]] == ["id", "name", "email", "posts"]
        assert meta["fields"][1]["isRequired"] is True
        assert meta["fields"][3]["refListKey"] == "Post"
        assert meta["views"]["name"]["Controller"] == "rail-cms/fields/Text/Controller"
        assert meta["adminConfig"] == {
            "defaultPageSize": 50,
            "defaultColumns": "name,email",
            "defaultSort": "name",
            "maximumPageSize": 1000,
        }

    def test_unreadable_fields_are_left_out(self, make_registry):
        registry = make_registry(
            User={
                "fields": {
                    "name": {"type": Text},
                    "password": {"type": Text, "access": {"read": False}},
                },
            }
        )

        meta = registry.get_list_by_key("User").get_admin_meta("public")

        assert [field["path"] for field in meta["fields"]] == ["id", "name"]

    def test_page_size_bounds(self):
        registry = build_registry(
            {
                "User": {
                    "fields": {"name": {"type": Text}},
                    "admin_config": {
                        "default_page_size": 200,
                        "maximum_page_size": 100,
                        "default_columns": "name, id",
                    },
                }
            }
        )
        registry.init_lists()

        admin_config = registry.get_list_by_key("User").get_admin_meta("public")["adminConfig"]

        assert admin_config["maximumPageSize"] == 200
        assert admin_config["defaultColumns"] == "name,id"
