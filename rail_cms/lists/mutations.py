"""
List mutation mixin.

Public mutations check list and field access, load existing items under the
access filter and hand each item to the list's mutation pipeline. Every
single-item mutation runs inside ``_nested_mutation``: the root call owns
the ``MutationState``, nested calls triggered by relationship fields reuse
it, and after hooks only run once the whole graph is persisted.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from ..core.exceptions import throw_access_denied
from ..core.utils import LazyDeferred
from ..fields.relationship import resolve_backlinks
from ..pipeline import MutationContext
from .state import MutationState

logger = logging.getLogger(__name__)


class ListMutationMixin:
    """Create, update and delete operations of a List."""

    async def _nested_mutation(
        self,
        mutation_state: Optional[MutationState],
        context: Any,
        mutation: Callable[[MutationState], Awaitable[MutationContext]],
    ) -> Any:
        is_root_mutation = mutation_state is None
        if is_root_mutation:
            mutation_state = MutationState()

        ctx = await mutation(mutation_state)

        await resolve_backlinks(context, mutation_state)

        if ctx.after_hook is not None:
            mutation_state.after_change_stack.append(ctx.after_hook)
        if is_root_mutation:
            logger.debug(
                "Running after hooks",
                extra={"list_key": self.key, "count": len(mutation_state.after_change_stack)},
            )
            await mutation_state.drain_after_hooks()

        return ctx.result

    def _mutation_context(
        self, operation: str, context: Any, mutation_state: MutationState, **kwargs: Any
    ) -> MutationContext:
        return MutationContext(
            list=self,
            operation=operation,
            context=context,
            mutation_state=mutation_state,
            **kwargs,
        )

    # ------------------------------------------------------------------ #
    # Create
    # ------------------------------------------------------------------ #
    async def create_mutation(
        self, data: dict[str, Any], context: Any, mutation_state: Optional[MutationState] = None
    ) -> dict[str, Any]:
        operation = "create"
        gql_name = self.gql_names.create_mutation_name

        await self.check_list_access(context, data, operation, gql_name=gql_name)
        await self.check_field_access(
            operation, [{"existing_item": None, "data": data}], context, gql_name=gql_name
        )
        return await self._create_single(data, context, mutation_state)

    async def create_many_mutation(
        self, data: list[dict[str, Any]], context: Any, mutation_state: Optional[MutationState] = None
    ) -> list[Any]:
        operation = "create"
        gql_name = self.gql_names.create_many_mutation_name

        await self.check_list_access(context, data, operation, gql_name=gql_name)
        await self.check_field_access(
            operation,
            [{"existing_item": None, "data": entry.get("data") or {}} for entry in data],
            context,
            gql_name=gql_name,
        )
        return await asyncio.gather(
            *(
                self._create_single(entry.get("data") or {}, context, mutation_state)
                for entry in data
            ),
            return_exceptions=True,
        )

    async def _create_single(
        self, original_input: dict[str, Any], context: Any, mutation_state: Optional[MutationState]
    ) -> dict[str, Any]:
        async def mutation(state: MutationState) -> MutationContext:
            ctx = self._mutation_context(
                "create",
                context,
                state,
                original_input=original_input,
                created=LazyDeferred(),
            )
            try:
                return await self.pipelines["create"].execute(ctx)
            except Exception as exc:
                # Steps before persistence can fail too; waiting backlinks must see it.
                if not ctx.created.settled:
                    ctx.created.reject(exc)
                raise

        return await self._nested_mutation(mutation_state, context, mutation)

    # ------------------------------------------------------------------ #
    # Update
    # ------------------------------------------------------------------ #
    async def update_mutation(
        self,
        item_id: Any,
        data: dict[str, Any],
        context: Any,
        mutation_state: Optional[MutationState] = None,
    ) -> dict[str, Any]:
        operation = "update"
        gql_name = self.gql_names.update_mutation_name

        access = await self.check_list_access(
            context, data, operation, gql_name=gql_name, item_id=item_id
        )
        existing_item = await self.get_access_controlled_item(
            item_id, access, context=context, operation=operation, gql_name=gql_name
        )
        await self.check_field_access(
            operation,
            [{"existing_item": existing_item, "data": data}],
            context,
            gql_name=gql_name,
            extra_data={"itemId": item_id},
        )
        return await self._update_single(item_id, data, existing_item, context, mutation_state)

    async def update_many_mutation(
        self, data: list[dict[str, Any]], context: Any, mutation_state: Optional[MutationState] = None
    ) -> list[Any]:
        operation = "update"
        gql_name = self.gql_names.update_many_mutation_name
        ids = [str(entry["id"]) for entry in data]

        access = await self.check_list_access(
            context, data, operation, gql_name=gql_name, item_ids=ids
        )
        existing_items = await self.get_access_controlled_items(ids, access)
        existing_by_id = {str(item["id"]): item for item in existing_items}

        items_to_update = [
            {"id": item_id, "existing_item": existing_by_id[item_id], "data": entry.get("data") or {}}
            for item_id, entry in zip(ids, data)
            if item_id in existing_by_id
        ]
        await self.check_field_access(
            operation,
            items_to_update,
            context,
            gql_name=gql_name,
            extra_data={"itemIds": ids},
        )

        async def update_one(item_id: str, entry: dict[str, Any]) -> dict[str, Any]:
            existing_item = existing_by_id.get(item_id)
            if existing_item is None:
                throw_access_denied("mutation", context, gql_name, {"itemId": item_id})
            return await self._update_single(
                item_id, entry.get("data") or {}, existing_item, context, mutation_state
            )

        return await asyncio.gather(
            *(update_one(item_id, entry) for item_id, entry in zip(ids, data)),
            return_exceptions=True,
        )

    async def _update_single(
        self,
        item_id: Any,
        original_input: dict[str, Any],
        existing_item: dict[str, Any],
        context: Any,
        mutation_state: Optional[MutationState],
    ) -> dict[str, Any]:
        async def mutation(state: MutationState) -> MutationContext:
            ctx = self._mutation_context(
                "update",
                context,
                state,
                original_input=original_input,
                existing_item=existing_item,
                item_id=item_id,
            )
            return await self.pipelines["update"].execute(ctx)

        return await self._nested_mutation(mutation_state, context, mutation)

    # ------------------------------------------------------------------ #
    # Delete
    # ------------------------------------------------------------------ #
    async def delete_mutation(
        self, item_id: Any, context: Any, mutation_state: Optional[MutationState] = None
    ) -> dict[str, Any]:
        operation = "delete"
        gql_name = self.gql_names.delete_mutation_name

        access = await self.check_list_access(
            context, None, operation, gql_name=gql_name, item_id=item_id
        )
        existing_item = await self.get_access_controlled_item(
            item_id, access, context=context, operation=operation, gql_name=gql_name
        )
        return await self._delete_single(existing_item, context, mutation_state)

    async def delete_many_mutation(
        self, ids: list[Any], context: Any, mutation_state: Optional[MutationState] = None
    ) -> list[Any]:
        operation = "delete"
        gql_name = self.gql_names.delete_many_mutation_name

        access = await self.check_list_access(
            context, None, operation, gql_name=gql_name, item_ids=ids
        )
        existing_items = await self.get_access_controlled_items(ids, access)
        return await asyncio.gather(
            *(self._delete_single(item, context, mutation_state) for item in existing_items),
            return_exceptions=True,
        )

    async def _delete_single(
        self, existing_item: dict[str, Any], context: Any, mutation_state: Optional[MutationState]
    ) -> dict[str, Any]:
        async def mutation(state: MutationState) -> MutationContext:
            ctx = self._mutation_context(
                "delete",
                context,
                state,
                existing_item=existing_item,
                item_id=existing_item["id"],
            )
            return await self.pipelines["delete"].execute(ctx)

        return await self._nested_mutation(mutation_state, context, mutation)
