"""
Unit tests for access config parsing and request-time rule evaluation.
"""

import pytest

from rail_cms.access import (
    is_rule_enabled,
    parse_field_access,
    parse_list_access,
    validate_field_access_control,
    validate_list_access_control,
)
from rail_cms.core.exceptions import ListConfigurationError

pytestmark = pytest.mark.unit

SCHEMAS = ["public", "internal"]
ALL_OPERATIONS = ("create", "read", "update", "delete", "auth")


class TestParseListAccess:
    def test_boolean_shorthand_applies_to_every_operation(self):
        access = parse_list_access(list_key="User", access=False, schema_names=SCHEMAS)

        assert access == {
            schema: {operation: False for operation in ALL_OPERATIONS} for schema in SCHEMAS
        }

    def test_parsed_tables_are_read_only(self):
        access = parse_list_access(
            list_key="User", access={"public": {"read": True}}, schema_names=SCHEMAS
        )

        for schema in SCHEMAS:
            with pytest.raises(TypeError):
                access[schema]["read"] = False
        assert access["public"]["read"] is True

    def test_missing_access_uses_default(self):
        access = parse_list_access(list_key="User", schema_names=["public"])

        assert all(rule is True for rule in access["public"].values())

    def test_granular_config_fills_missing_operations_with_default(self):
        def can_update(**kwargs):
            return True

        access = parse_list_access(
            list_key="User",
            access={"create": False, "read": {"name": "x"}, "update": can_update},
            default_access=True,
        )

        assert access["public"] == {
            "create": False,
            "read": {"name": "x"},
            "update": can_update,
            "delete": True,
            "auth": True,
        }

    def test_declarative_create_is_rejected(self):
        with pytest.raises(ListConfigurationError) as exc_info:
            parse_list_access(list_key="User", access={"create": {"id": "1"}})

        assert "'create' cannot have a Declarative" in str(exc_info.value)

    def test_unknown_operation_is_rejected(self):
        with pytest.raises(ListConfigurationError):
            parse_list_access(list_key="User", access={"write": True})

    def test_invalid_shorthand_is_rejected(self):
        with pytest.raises(ListConfigurationError):
            parse_list_access(list_key="User", access="yes")

    def test_per_schema_config(self):
        access = parse_list_access(
            list_key="User",
            access={"public": {"read": True, "create": False}, "internal": True},
            default_access=False,
            schema_names=SCHEMAS,
        )

        assert access["public"]["read"] is True
        assert access["public"]["create"] is False
        assert access["public"]["delete"] is False
        assert all(rule is True for rule in access["internal"].values())

    def test_schema_missing_from_per_schema_config_gets_default(self):
        access = parse_list_access(
            list_key="User", access={"internal": False}, default_access=True, schema_names=SCHEMAS
        )

        assert all(rule is True for rule in access["public"].values())
        assert all(rule is False for rule in access["internal"].values())

    def test_mixed_schema_names_are_rejected(self):
        with pytest.raises(ListConfigurationError) as exc_info:
            parse_list_access(
                list_key="User", access={"public": True, "other": True}, schema_names=SCHEMAS
            )

        assert "Invalid schema names: other" in str(exc_info.value)


class TestParseFieldAccess:
    def test_field_access_has_three_operations(self):
        access = parse_field_access(list_key="User", field_path="name", access={"update": False})

        assert access == {"public": {"create": True, "read": True, "update": False}}

    def test_declarative_field_rule_is_rejected(self):
        with pytest.raises(ListConfigurationError):
            parse_field_access(list_key="User", field_path="name", access={"read": {"id": "1"}})

    def test_delete_is_not_a_field_operation(self):
        with pytest.raises(ListConfigurationError):
            parse_field_access(list_key="User", field_path="name", access={"delete": False})


def test_is_rule_enabled():
    assert is_rule_enabled(True)
    assert is_rule_enabled({"id": "1"})
    assert is_rule_enabled(lambda **kwargs: False)
    assert not is_rule_enabled(False)
    assert not is_rule_enabled(None)


class TestValidateListAccess:
    @pytest.mark.asyncio
    async def test_static_rule_is_returned(self):
        result = await validate_list_access_control(
            access={"read": {"name": "x"}}, list_key="User", operation="read"
        )

        assert result == {"name": "x"}

    @pytest.mark.asyncio
    async def test_callable_receives_request_arguments(self):
        received = {}

        def rule(**kwargs):
            received.update(kwargs)
            return {"id": kwargs["authentication"]["item"]["id"]}

        result = await validate_list_access_control(
            access={"update": rule},
            list_key="User",
            operation="update",
            authentication={"item": {"id": "7"}, "list_key": "User"},
            original_input={"name": "x"},
            gql_name="updateUser",
            item_id="7",
        )

        assert result == {"id": "7"}
        assert received["list_key"] == "User"
        assert received["operation"] == "update"
        assert received["gql_name"] == "updateUser"
        assert received["item_id"] == "7"
        assert received["original_input"] == {"name": "x"}

    @pytest.mark.asyncio
    async def test_async_callable_is_awaited(self):
        async def rule(**kwargs):
            return False

        result = await validate_list_access_control(
            access={"delete": rule}, list_key="User", operation="delete"
        )

        assert result is False

    @pytest.mark.asyncio
    async def test_anonymous_authentication_is_empty(self):
        received = {}

        def rule(authentication, **kwargs):
            received["authentication"] = authentication
            return True

        await validate_list_access_control(
            access={"read": rule},
            list_key="User",
            operation="read",
            authentication={"list_key": "User"},
        )

        assert received["authentication"] == {}

    @pytest.mark.asyncio
    async def test_non_boolean_result_is_rejected(self):
        with pytest.raises(TypeError):
            await validate_list_access_control(
                access={"read": lambda **kwargs: "yes"}, list_key="User", operation="read"
            )

    @pytest.mark.asyncio
    async def test_declarative_create_result_is_rejected(self):
        with pytest.raises(TypeError):
            await validate_list_access_control(
                access={"create": lambda **kwargs: {"id": "1"}}, list_key="User", operation="create"
            )


class TestValidateFieldAccess:
    @pytest.mark.asyncio
    async def test_callable_receives_existing_item(self):
        def rule(existing_item, **kwargs):
            return existing_item["id"] == "1"

        allowed = await validate_field_access_control(
            access={"update": rule},
            list_key="User",
            field_key="name",
            operation="update",
            existing_item={"id": "1"},
        )

        assert allowed is True

    @pytest.mark.asyncio
    async def test_non_boolean_result_is_rejected(self):
        with pytest.raises(TypeError):
            await validate_field_access_control(
                access={"read": lambda **kwargs: {"id": "1"}},
                list_key="User",
                field_key="name",
                operation="read",
            )
