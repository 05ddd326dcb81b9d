"""
Small helpers shared by the list engine.

``UNSET`` marks a value that was not provided ("no change"), which is
distinct from an explicit ``None`` ("set to null").
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, TypeVar

T = TypeVar("T")


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


async def maybe_await(value: Any) -> Any:
    """Await ``value`` when it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


async def resolve_all_keys(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Concurrently resolve every value of ``mapping``, keeping its keys."""
    keys = list(mapping.keys())
    values = await asyncio.gather(*(maybe_await(mapping[key]) for key in keys))
    return dict(zip(keys, values))


def omit(mapping: Mapping[str, Any], keys: Iterable[str]) -> dict[str, Any]:
    excluded = set(keys)
    return {key: value for key, value in mapping.items() if key not in excluded}


def omit_unset(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Drop every ``UNSET`` value while keeping explicit ``None``."""
    return {key: value for key, value in mapping.items() if value is not UNSET}


def merge_resolved_data(*layers: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """
    Merge data layers, later layers taking precedence.

    An ``UNSET`` value never overrides an earlier value; ``None`` does.
    """
    result: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if value is UNSET:
                continue
            result[key] = value
    return result


def unique(values: Iterable[T]) -> list[T]:
    """Remove duplicates while keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


def intersection(left: Iterable[T], right: Iterable[T]) -> list[T]:
    right_values = set(right)
    return [value for value in unique(left) if value in right_values]


def flatten(nested: Iterable[Iterable[T]]) -> list[T]:
    return [value for group in nested for value in group]


def obj_merge(mappings: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for mapping in mappings:
        result.update(mapping)
    return result


def merge_where_clause(query_args: dict[str, Any], where_to_merge: Any) -> dict[str, Any]:
    """
    AND a declarative access filter into ``query_args['where']``.

    Non-mapping access results (``True``) leave the arguments unchanged.
    """
    if not isinstance(where_to_merge, dict):
        return query_args
    where = dict(query_args.get("where") or {})
    where["AND"] = [*where.get("AND", []), where_to_merge]
    return {**query_args, "where": where}


def query_args_from_graphql(args: Mapping[str, Any]) -> dict[str, Any]:
    """Translate GraphQL list arguments into adapter query arguments."""
    query_args = {key: value for key, value in args.items() if value is not None}
    if "orderBy" in query_args:
        query_args["order_by"] = query_args.pop("orderBy")
    return query_args


class LazyDeferred:
    """
    A settle-once value whose future is only created when someone asks for it.

    ``resolve``/``reject`` never block, so a consumer awaiting ``future`` sees
    the outcome before the producer runs its next statement.
    """

    def __init__(self):
        self._future: Optional[asyncio.Future] = None
        self._settled = False
        self._result: Any = None
        self._exception: Optional[BaseException] = None

    @classmethod
    def resolved(cls, value: Any) -> "LazyDeferred":
        deferred = cls()
        deferred.resolve(value)
        return deferred

    @property
    def settled(self) -> bool:
        return self._settled

    @property
    def failed(self) -> bool:
        return self._exception is not None

    @property
    def future(self) -> asyncio.Future:
        if self._future is None:
            self._future = asyncio.get_running_loop().create_future()
            if self._settled:
                self._apply(self._future)
        return self._future

    def resolve(self, value: Any) -> None:
        self._settle(result=value)

    def reject(self, exception: BaseException) -> None:
        self._settle(exception=exception)

    def result(self) -> Any:
        if not self._settled:
            raise asyncio.InvalidStateError("Deferred value is not settled yet")
        if self._exception is not None:
            raise self._exception
        return self._result

    def _settle(self, result: Any = None, exception: Optional[BaseException] = None) -> None:
        if self._settled:
            raise asyncio.InvalidStateError("Deferred value already settled")
        self._settled = True
        self._result = result
        self._exception = exception
        if self._future is not None:
            self._apply(self._future)

    def _apply(self, future: asyncio.Future) -> None:
        if self._exception is not None:
            future.set_exception(self._exception)
            # Marks the exception retrieved; awaiting consumers still receive it.
            future.exception()
        else:
            future.set_result(self._result)

    def __await__(self):
        return self.future.__await__()


def call_hook(hook: Callable[..., Any], **kwargs: Any) -> Awaitable[Any]:
    """Invoke a sync or async hook with keyword arguments."""
    return maybe_await(hook(**kwargs))
