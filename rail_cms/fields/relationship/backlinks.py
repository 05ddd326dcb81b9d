"""
Backlink bookkeeping for two-sided relationships.

When ``Post.author`` references ``User.posts``, changing one side must update
the other. Nested mutations stage those reciprocal edits on the shared
``MutationState`` queues; they are applied once the local item they depend on
has been persisted (its deferred is settled).

Queue layout::

    queues[foreign_list_key][foreign_item_id][foreign_path] = {
        "connect": [BacklinkEntry, ...],
        "disconnect": [BacklinkEntry, ...],
    }
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable

from ...core.utils import LazyDeferred, unique

if TYPE_CHECKING:
    from ...lists.state import MutationState

logger = logging.getLogger(__name__)

BACKLINK_OPERATIONS = ("connect", "disconnect")


@dataclass
class BacklinkEntry:
    """A staged reciprocal edit waiting on the local item to exist."""

    deferred: LazyDeferred
    local_list_key: str
    local_path: str


def enqueue_backlink_operations(
    mutation_state: "MutationState",
    operations: dict[str, Iterable[Any]],
    deferred: LazyDeferred,
    *,
    local_list_key: str,
    local_path: str,
    foreign_list_key: str,
    foreign_path: str,
) -> None:
    list_queue = mutation_state.queues.setdefault(foreign_list_key, {})
    for operation in BACKLINK_OPERATIONS:
        for foreign_id in operations.get(operation) or []:
            if not foreign_id:
                continue
            path_queue = list_queue.setdefault(str(foreign_id), {}).setdefault(
                foreign_path, {"connect": [], "disconnect": []}
            )
            path_queue[operation].append(
                BacklinkEntry(
                    deferred=deferred,
                    local_list_key=local_list_key,
                    local_path=local_path,
                )
            )


def _take_ready_operations(queues: dict[str, Any]) -> dict[str, dict[str, dict[str, dict[str, list[str]]]]]:
    """
    Pop every queued path whose entries are all settled.

    Entries whose local item failed to persist are dropped. Paths still
    waiting on an unsettled deferred stay queued for the mutation that owns
    that deferred.
    """
    ready: dict[str, dict[str, dict[str, dict[str, list[str]]]]] = {}
    for list_key in list(queues):
        list_queue = queues[list_key]
        for item_id in list(list_queue):
            item_queue = list_queue[item_id]
            for path in list(item_queue):
                path_queue = item_queue[path]
                entries = [entry for operation in BACKLINK_OPERATIONS for entry in path_queue[operation]]
                if not all(entry.deferred.settled for entry in entries):
                    continue
                del item_queue[path]
                ready.setdefault(list_key, {}).setdefault(item_id, {})[path] = {
                    operation: [
                        str(entry.deferred.result()["id"])
                        for entry in path_queue[operation]
                        if not entry.deferred.failed
                    ]
                    for operation in BACKLINK_OPERATIONS
                }
            if not item_queue:
                del list_queue[item_id]
        if not list_queue:
            del queues[list_key]
    return ready


async def _unlink_previous_owner(field: Any, owner_id: str, item_id: str) -> None:
    """Remove ``item_id`` from the reciprocal field of the owner it was moved away from."""
    ref_list, ref_field = field.try_resolve_ref_list()
    if ref_field is None:
        return
    owners = await ref_list.adapter.items_query({"where": {"id": owner_id}, "first": 1})
    if not owners:
        return
    value = owners[0].get(ref_field.path)
    if ref_field.many:
        current = [str(linked) for linked in value or []]
        if item_id not in current:
            return
        new_value = [linked for linked in current if linked != item_id]
    elif value is not None and str(value) == item_id:
        new_value = None
    else:
        return
    logger.debug(
        "Unlinking previous owner",
        extra={"list_key": ref_list.key, "item_id": owner_id, "path": ref_field.path},
    )
    await ref_list.adapter.update(owner_id, {ref_field.path: new_value})


async def _apply_backlinks(lst: Any, item_id: str, operations: dict[str, dict[str, list[str]]]) -> None:
    items = await lst.adapter.items_query({"where": {"id": item_id}, "first": 1})
    if not items:
        logger.debug(
            "Skipping backlinks for missing item",
            extra={"list_key": lst.key, "item_id": item_id},
        )
        return
    item = items[0]

    data: dict[str, Any] = {}
    previous_owners = []
    for path, changes in operations.items():
        field = lst.fields_by_path[path]
        connect, disconnect = changes["connect"], changes["disconnect"]
        if field.many:
            current = [str(value) for value in item.get(path) or []]
            data[path] = unique(
                [value for value in current if value not in disconnect] + connect
            )
        elif connect:
            data[path] = connect[-1]
            previous = item.get(path)
            if previous is not None and str(previous) != connect[-1]:
                previous_owners.append((field, str(previous)))
        elif disconnect and str(item.get(path)) in disconnect:
            data[path] = None

    if not data:
        return
    logger.debug(
        "Applying backlinks",
        extra={"list_key": lst.key, "item_id": item_id, "paths": sorted(data)},
    )
    await lst.adapter.update(item_id, data)
    for field, owner_id in previous_owners:
        await _unlink_previous_owner(field, owner_id, item_id)


async def resolve_backlinks(context: Any, mutation_state: "MutationState") -> None:
    """Apply every staged backlink whose local item has been persisted."""
    ready = _take_ready_operations(mutation_state.queues)
    await asyncio.gather(
        *(
            _apply_backlinks(context.get_list_by_key(list_key), item_id, operations)
            for list_key, items in ready.items()
            for item_id, operations in items.items()
        )
    )
