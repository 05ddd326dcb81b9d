"""
MutationState - shared state of one root mutation and its nested mutations.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

AfterHook = Callable[[], Awaitable[Any]]


@dataclass
class MutationState:
    """
    Owned by the root mutation call and passed explicitly to every nested
    mutation it triggers. Never shared between requests.

    Attributes:
        after_change_stack: After hooks, drained last-in first-out by the root
        queues: Staged backlink operations, see ``fields.relationship.backlinks``
        transaction: Reserved for adapters supporting transactions
    """

    after_change_stack: list[AfterHook] = field(default_factory=list)
    queues: dict[str, Any] = field(default_factory=dict)
    transaction: dict[str, Any] = field(default_factory=dict)

    async def drain_after_hooks(self) -> None:
        while self.after_change_stack:
            after_hook = self.after_change_stack.pop()
            await after_hook()
