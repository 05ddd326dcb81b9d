"""
Nested relationship operations (``create``, ``connect``, ``disconnect``,
``disconnectAll``) resolved into item ids.

Connects go through the referenced list's access-controlled item query, so a
user can only link items they can read. Nested creates run the referenced
list's full create mutation with the shared mutation state.
"""

import asyncio
from typing import Any, Optional

from ...core.exceptions import AccessDeniedError


async def _lookup_disconnect_ids(ref_list: Any, wheres: list[dict[str, Any]], context: Any) -> list[str]:
    try:
        items = await ref_list.list_query(
            {"where": {"OR": wheres}},
            context,
            gql_name=ref_list.gql_names.list_query_name,
        )
    except AccessDeniedError:
        return []
    return [str(item["id"]) for item in items]


async def _connect(ref_list: Any, where: dict[str, Any], context: Any) -> dict[str, Any]:
    return await ref_list.item_query(
        {"where": where}, context, gql_name=ref_list.gql_names.item_query_name
    )


async def resolve_nested_many(
    *,
    input: dict[str, Any],
    current_value: Optional[list[Any]],
    ref_list: Any,
    context: Any,
    mutation_state: Any,
) -> dict[str, Any]:
    current = [str(value) for value in current_value or [] if value]

    disconnect: list[str] = []
    if input.get("disconnectAll"):
        disconnect = list(current)
    elif input.get("disconnect"):
        # Ids are taken as given; only where-based selectors need a lookup.
        with_id = [where for where in input["disconnect"] if where.get("id")]
        without_id = [where for where in input["disconnect"] if not where.get("id")]
        disconnect = [str(where["id"]) for where in with_id]
        if without_id:
            disconnect += await _lookup_disconnect_ids(ref_list, without_id, context)

    connect: list[str] = []
    if input.get("connect"):
        connected = await asyncio.gather(
            *(_connect(ref_list, where, context) for where in input["connect"])
        )
        connect = [str(item["id"]) for item in connected]

    create: list[str] = []
    if input.get("create"):
        created = await asyncio.gather(
            *(
                ref_list.create_mutation(data, context, mutation_state=mutation_state)
                for data in input["create"]
            )
        )
        create = [str(item["id"]) for item in created]

    return {"create": create, "connect": connect, "disconnect": disconnect, "current_value": current}


async def resolve_nested_single(
    *,
    input: dict[str, Any],
    current_value: Any,
    ref_list: Any,
    context: Any,
    mutation_state: Any,
) -> dict[str, Any]:
    current = str(current_value) if current_value else None

    disconnect: list[str] = []
    if current is not None:
        if input.get("disconnectAll"):
            disconnect = [current]
        elif input.get("disconnect"):
            where = input["disconnect"]
            if where.get("id"):
                matched = [str(where["id"])]
            else:
                matched = await _lookup_disconnect_ids(ref_list, [where], context)
            if current in matched:
                disconnect = [current]

    create: list[str] = []
    connect: list[str] = []
    if input.get("create") is not None:
        item = await ref_list.create_mutation(input["create"], context, mutation_state=mutation_state)
        create = [str(item["id"])]
    elif input.get("connect") is not None:
        item = await _connect(ref_list, input["connect"], context)
        connect = [str(item["id"])]

    return {"create": create, "connect": connect, "disconnect": disconnect, "current_value": current}
