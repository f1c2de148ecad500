"""Optimistic overlay over a server-backed collection.

``displayed`` is always ``reduce_displayed(base, pending)``: the last
known-good collection with queued add/delete mutations applied on top.

Failure policy: no rollback. A failed write is logged and handed to the
error callback, and its mutation stays visible until the next ``refresh``
brings in the authoritative collection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from operator import attrgetter
from typing import Any, Awaitable, Callable, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

KeyFunc = Callable[[Any], Any]
ErrorCallback = Callable[[str, BaseException], None]


class MutationAction(str, Enum):
    ADD = "add"
    DELETE = "delete"


@dataclass(frozen=True)
class PendingMutation(Generic[T]):
    """A queued mutation; ``settled`` once its backend write has returned."""

    action: MutationAction
    item: T
    settled: bool = False


def reduce_displayed(
    base: Iterable[T],
    pending: Sequence[PendingMutation[T]],
    key: KeyFunc = attrgetter("id"),
    *,
    prepend: bool = True,
) -> Tuple[T, ...]:
    """Apply pending mutations, in order, to ``base``. Pure."""
    items: List[T] = list(base)
    for mutation in pending:
        item_key = key(mutation.item)
        if mutation.action is MutationAction.ADD:
            if any(key(existing) == item_key for existing in items):
                continue
            if prepend:
                items.insert(0, mutation.item)
            else:
                items.append(mutation.item)
        else:
            items = [existing for existing in items if key(existing) != item_key]
    return tuple(items)


class OptimisticStore(Generic[T]):
    """Collection whose adds and deletes show up before the server confirms them."""

    def __init__(
        self,
        base: Iterable[T],
        *,
        write_add: Callable[[T], Awaitable[Optional[T]]],
        write_delete: Callable[[T], Awaitable[Any]],
        key: KeyFunc = attrgetter("id"),
        prepend: bool = True,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._base: Tuple[T, ...] = tuple(base)
        self._pending: List[PendingMutation[T]] = []
        self._write_add = write_add
        self._write_delete = write_delete
        self._key = key
        self._prepend = prepend
        self._on_error = on_error
        self._displayed: Tuple[T, ...] = self._base

    @property
    def base(self) -> Tuple[T, ...]:
        return self._base

    @property
    def pending(self) -> Tuple[PendingMutation[T], ...]:
        return tuple(self._pending)

    @property
    def displayed(self) -> Tuple[T, ...]:
        return self._displayed

    def _recompute(self) -> None:
        self._displayed = reduce_displayed(
            self._base, self._pending, self._key, prepend=self._prepend
        )

    def _settle(self, mutation: PendingMutation[T], confirmed: Optional[T] = None) -> None:
        for index, current in enumerate(self._pending):
            if current is mutation:
                update = {"settled": True}
                if confirmed is not None:
                    update["item"] = confirmed
                self._pending[index] = replace(current, **update)
                break
        self._recompute()

    async def apply(self, action: MutationAction | str, item: T) -> bool:
        """
        Show the mutation immediately, then perform the backend write.

        Returns True when the write succeeded.
        """
        action = MutationAction(action)
        mutation: PendingMutation[T] = PendingMutation(action, item)
        self._pending.append(mutation)
        self._recompute()

        try:
            if action is MutationAction.ADD:
                confirmed = await self._write_add(item)
            else:
                await self._write_delete(item)
                confirmed = None
        except Exception as exc:
            logger.warning("Optimistic %s of %s failed: %s", action.value, self._key(item), exc)
            self._settle(mutation)
            if self._on_error is not None:
                self._on_error(action.value, exc)
            return False

        self._settle(mutation, confirmed)
        return True

    async def add(self, item: T) -> bool:
        return await self.apply(MutationAction.ADD, item)

    async def delete(self, item: T) -> bool:
        return await self.apply(MutationAction.DELETE, item)

    def refresh(self, base: Iterable[T]) -> None:
        """
        Replace the base with a fresh server collection and reconcile.

        Settled mutations are dropped. In-flight ones are dropped too once
        the new base already reflects them.
        """
        self._base = tuple(base)
        present = {self._key(item) for item in self._base}
        kept: List[PendingMutation[T]] = []
        for mutation in self._pending:
            if mutation.settled:
                continue
            in_base = self._key(mutation.item) in present
            if mutation.action is MutationAction.ADD and in_base:
                continue
            if mutation.action is MutationAction.DELETE and not in_base:
                continue
            kept.append(mutation)
        self._pending = kept
        self._recompute()


__all__ = ["MutationAction", "PendingMutation", "OptimisticStore", "reduce_displayed"]
