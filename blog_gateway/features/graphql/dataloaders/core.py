"""Request-scoped batching and caching loader.

``KeyScopedLoader`` is a Strawberry ``DataLoader`` with three behaviours
tightened for request-scoped use:

- ``prime()`` never touches a key that is cached or still pending. Strawberry
  resolves a pending key with the primed value instead.
- A failed batch drops its keys from the cache before the error reaches the
  waiters, so the next ``load()`` fetches again. Strawberry keeps the failed
  futures cached.
- ``dispatch()`` flushes the pending batch on demand instead of waiting for
  the ``call_soon`` callback Strawberry schedules.

How it works:
    f1 = loader.load(a)     # queued, flush scheduled with loop.call_soon
    f2 = loader.load(b)     # queued
    f3 = loader.load(a)     # same future as f1, not queued again
    await f1                # loop runs the flush: load_fn([a, b])
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from strawberry.dataloader import Batch, DataLoader, dispatch_batch

from blog_gateway.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Awaitable, Callable, Hashable, Iterable, Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

_lazy = get_lazy_logger(__name__)

K = TypeVar("K", bound="Hashable")
V = TypeVar("V")


class KeyScopedLoader(DataLoader[K, V | None]):
    """Batching, deduplicating, caching facade over a bulk fetch function.

    Args:
        batch_load_fn: Async function taking a list of unique keys and
            returning a sequence of the same length and order; ``None`` marks
            a key with no matching row.
        max_batch_size: Start a new batch once this many keys are queued, so
            one flush issues several fetches. ``None`` issues one fetch per
            flush.
        name: Label used in log records.

    Usage:
        loader = KeyScopedLoader(fetch_users)
        user = await loader.load(user_id)
        users = await loader.load_many([a, b, c])
    """

    def __init__(
        self,
        batch_load_fn: Callable[[list[K]], Awaitable[Sequence[V | None]]],
        *,
        max_batch_size: int | None = None,
        name: str | None = None,
    ) -> None:
        if max_batch_size is not None and max_batch_size < 1:
            msg = "max_batch_size must be a positive integer or None"
            raise ValueError(msg)

        super().__init__(load_fn=self._load_and_evict, max_batch_size=max_batch_size)
        self._batch_load_fn = batch_load_fn
        self.name = name or type(self).__name__

    def load(self, key: K) -> asyncio.Future[V | None]:
        """Return a future for ``key``, queueing it if it is not cached or pending."""
        if self.cache_map.get(key) is None:
            # A key cleared while still queued rejoins its batch
            for task in self._open_tasks():
                if task.key == key and not task.future.cancelled():
                    self.cache_map.set(key, task.future)
                    return task.future
        return super().load(key)

    def prime_many(self, data: Mapping[K, V | None], force: bool = False) -> None:
        """Seed the cache without fetching; keys already cached or pending are skipped."""
        for key, value in data.items():
            if self.cache_map.get(key) is not None and not force:
                continue
            future: asyncio.Future[V | None] = self.loop.create_future()
            future.set_result(value)
            self.cache_map.set(key, future)

    def clear(self, key: K) -> None:
        """Evict ``key`` so the next ``load()`` fetches it again.

        A batch already in flight still resolves its existing waiters.
        """
        if self.cache_map.get(key) is not None:
            self.cache_map.delete(key)

    def clear_many(self, keys: Iterable[K]) -> None:
        for key in keys:
            self.clear(key)

    async def dispatch(self) -> None:
        """Flush the pending batch now and wait for it to settle.

        Errors are delivered to the waiting futures, not raised here. The
        callback already scheduled for the batch finds it empty and returns.
        """
        batch = self.batch
        if batch is None or batch.dispatched or not batch.tasks:
            return
        flushed: Batch[K, V | None] = Batch(tasks=batch.tasks)
        batch.tasks = []
        batch.dispatched = True
        await dispatch_batch(self, flushed)

    @property
    def pending_keys(self) -> list[K]:
        """Keys queued for the next flush, in first-seen order."""
        return [task.key for task in self._open_tasks()]

    def _open_tasks(self) -> list:
        if self.batch is None or self.batch.dispatched:
            return []
        return self.batch.tasks

    async def _load_and_evict(self, keys: list[K]) -> list[V | None]:
        _lazy.debug(lambda: f"{self.name}: fetching {len(keys)} key(s)")
        try:
            values = list(await self._batch_load_fn(keys))
            if len(values) != len(keys):
                msg = (
                    f"{self.name}: batch function returned {len(values)} values "
                    f"for {len(keys)} keys"
                )
                raise ValueError(msg)
        except Exception as e:
            _lazy.debug(lambda: f"{self.name}: batch of {len(keys)} failed: {e!r}")
            self._evict_pending(keys)
            raise
        return values

    def _evict_pending(self, keys: list[K]) -> None:
        for key in keys:
            future = self.cache_map.get(key)
            if future is not None and not future.done():
                self.cache_map.delete(key)


class SessionLoader(KeyScopedLoader[K, V]):
    """KeyScopedLoader whose fetch runs against the request's database session.

    ``AsyncSession`` does not allow concurrent use, so every fetch holds the
    request-wide lock shared with mutations and the other loaders.

    Subclasses implement ``fetch(session, keys)``.
    """

    def __init__(
        self,
        session: AsyncSession,
        lock: asyncio.Lock,
        *,
        max_batch_size: int | None = None,
    ) -> None:
        super().__init__(self._locked_fetch, max_batch_size=max_batch_size)
        self._session = session
        self._lock = lock

    async def _locked_fetch(self, keys: list[K]) -> Sequence[V | None]:
        async with self._lock:
            return await self.fetch(self._session, keys)

    async def fetch(self, session: AsyncSession, keys: list[K]) -> Sequence[V | None]:
        raise NotImplementedError


__all__ = ["KeyScopedLoader", "SessionLoader"]
