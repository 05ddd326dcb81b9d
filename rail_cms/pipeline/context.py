"""
MutationContext - Carries state through the mutation pipeline.

The context is created for each single-item mutation (one per item in the
bulk variants) and passed through each pipeline step. Each step can read
from and modify the context as needed.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from ..core.utils import LazyDeferred

if TYPE_CHECKING:
    from ..core.context import RequestContext
    from ..lists import List
    from ..lists.state import MutationState


@dataclass
class MutationContext:
    """
    Carries state through the mutation pipeline.

    Attributes:
        list: The list being mutated
        operation: The operation type ("create", "update", "delete")
        context: Request context of the acting user
        mutation_state: State shared with nested mutations of the same root
        original_input: Input as received (immutable reference)
        resolved_data: Data built up by the steps and handed to the adapter
        existing_item: Existing item for update/delete operations
        item_id: Id of the item being updated
        created: Settles with the new item once a create is persisted
        result: The item returned by the mutation
        after_hook: Queued on the mutation state once the step chain is done
        extra: Dictionary for storing additional step-specific data
    """

    list: "List"
    operation: str
    context: "RequestContext"
    mutation_state: "MutationState"

    original_input: dict[str, Any] = field(default_factory=dict)
    resolved_data: dict[str, Any] = field(default_factory=dict)

    existing_item: Optional[dict[str, Any]] = None
    item_id: Any = None
    created: Optional[LazyDeferred] = None

    result: Optional[dict[str, Any]] = None
    after_hook: Optional[Callable[[], Awaitable[Any]]] = None

    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def actions(self) -> dict[str, Any]:
        """Helpers bound to the request context, handed to every hook."""
        return {name: action(self.context) for name, action in self.list.hooks_actions.items()}

    def hook_args(self, **overrides: Any) -> dict[str, Any]:
        """Keyword arguments passed to field and list hooks."""
        args: dict[str, Any] = {
            "existing_item": self.existing_item,
            "context": self.context,
            "actions": self.actions,
            "operation": self.operation,
        }
        if self.operation != "delete":
            args["resolved_data"] = self.resolved_data
            args["original_input"] = self.original_input
        args.update(overrides)
        return args
