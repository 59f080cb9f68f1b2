from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from cleanbook.application.exceptions import CatalogUnavailable
from cleanbook.application.ports.catalog_source import CatalogSourcePort
from cleanbook.core.config import settings
from cleanbook.domain.entities.catalog import AddonCatalogEntry, CatalogSnapshot, ServiceCatalogEntry


class CatalogCache:
    """
    Read-only, time-cached view of services and add-ons.

    Concurrent loads of the same list share one in-flight fetch. Failures
    are not cached, so the next call retries.
    """

    def __init__(
        self,
        source: CatalogSourcePort,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._ttl = settings.CATALOG_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._values: dict[str, tuple[tuple[Any, ...], float]] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self._logger = logging.getLogger(__name__)

    async def load_services(self) -> list[ServiceCatalogEntry]:
        return list(await self._get("services", self._source.list_services))

    async def load_addons(self) -> list[AddonCatalogEntry]:
        return list(await self._get("addons", self._source.list_addons))

    async def load(self) -> CatalogSnapshot:
        services, addons = await asyncio.gather(self.load_services(), self.load_addons())
        return CatalogSnapshot(services=tuple(services), addons=tuple(addons))

    @property
    def snapshot(self) -> CatalogSnapshot | None:
        """The loaded catalog, or None until both lists have been fetched."""
        if "services" not in self._values or "addons" not in self._values:
            return None
        return CatalogSnapshot(services=self._values["services"][0], addons=self._values["addons"][0])

    def cancel(self) -> None:
        """Cancel in-flight fetches; waiters receive CancelledError."""
        for key, task in list(self._inflight.items()):
            if not task.done():
                task.cancel()
                self._logger.info("Catalog fetch cancelled", extra={"reason": key})
        self._inflight.clear()

    def _fresh(self, key: str) -> tuple[Any, ...] | None:
        cached = self._values.get(key)
        if cached is None:
            return None
        items, fetched_at = cached
        if self._clock() - fetched_at > self._ttl:
            return None
        return items

    async def _get(self, key: str, fetch: Callable[[], Awaitable[list[Any]]]) -> tuple[Any, ...]:
        items = self._fresh(key)
        if items is not None:
            return items

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key, fetch))
            self._inflight[key] = task
        try:
            # A cancelled caller leaves the shared fetch running.
            return await asyncio.shield(task)
        finally:
            if task.done() and self._inflight.get(key) is task:
                del self._inflight[key]

    async def _fetch(self, key: str, fetch: Callable[[], Awaitable[list[Any]]]) -> tuple[Any, ...]:
        self._logger.info("Catalog fetch started", extra={"reason": key})
        try:
            items = tuple(await fetch())
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._logger.warning("Catalog fetch failed", extra={"reason": key, "error": str(e)})
            raise CatalogUnavailable(f"Could not load {key}") from e
        self._values[key] = (items, self._clock())
        self._logger.info("Catalog fetch succeeded", extra={"reason": key})
        return items
