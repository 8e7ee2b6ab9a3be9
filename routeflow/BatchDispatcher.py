import asyncio
import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, Union

from routeflow.RoutePoint import Route, RoutePoint
from routeflow.RouteSampler import RouteSampler
from routeflow.config import SamplingConfig
from routeflow.errors import DispatchError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class Success:
    point: Any
    payload: Any
    failure = False


@dataclass(frozen=True)
class Failure:
    point: Any
    error: BaseException
    failure = True


EnrichmentResult = Union[Success, Failure]


def almost(operation: Callable[[Any], Awaitable[Any]]) -> Callable[[Any], Awaitable[EnrichmentResult]]:
    """
    Wraps a fallible async call so that it never raises for a single point:
    errors come back as ``Failure`` and values as ``Success``.

    Only a call that cannot be made at all (not callable, wrong signature, not
    awaitable) raises ``DispatchError``.
    """
    if not callable(operation):
        raise DispatchError(f"enrichment operation is not callable: {operation!r}")

    @functools.wraps(operation)
    async def wrapper(point):
        try:
            pending = operation(point)
        except TypeError as exc:
            raise DispatchError(f"enrichment operation cannot be invoked: {exc}") from exc
        except Exception as exc:
            logger.warning("Enrichment call for %s failed: %r", point, exc)
            return Failure(point, exc)

        if not inspect.isawaitable(pending):
            raise DispatchError(
                f"enrichment operation returned {type(pending).__name__}, expected an awaitable")

        try:
            payload = await pending
        except Exception as exc:
            logger.warning("Enrichment call for %s failed: %r", point, exc)
            return Failure(point, exc)
        return Success(point, payload)

    return wrapper


class ChunkPacer:
    """
    Counts issued calls and pauses after each full chunk. ``flush`` pauses once
    more for a trailing partial chunk, so N calls cost ceil(N / chunk_size) pauses.
    """

    def __init__(self, chunk_size: int, pause_s: float, sleep: Optional[Sleep] = None):
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self.chunk_size = chunk_size
        self.pause_s = pause_s
        self.sleep = sleep or asyncio.sleep
        self.issued = 0
        self.pauses = 0

    async def _pause(self) -> None:
        self.pauses += 1
        logger.debug("issued %d calls, pausing %.2fs", self.issued, self.pause_s)
        await self.sleep(self.pause_s)

    async def tick(self) -> None:
        self.issued += 1
        if self.issued % self.chunk_size == 0:
            await self._pause()
        else:
            # let the call just scheduled start before the scan moves on
            await asyncio.sleep(0)

    async def flush(self) -> None:
        if self.issued % self.chunk_size:
            await self._pause()


class BatchDispatcher:
    def __init__(self, chunk_size: int = 50, pause_s: float = 1.0, sleep: Optional[Sleep] = None):
        self.chunk_size = chunk_size
        self.pause_s = pause_s
        self.sleep = sleep

    @classmethod
    def from_config(cls, config: SamplingConfig, sleep: Optional[Sleep] = None) -> "BatchDispatcher":
        return cls(chunk_size=config.chunk_size, pause_s=config.chunk_pause_s, sleep=sleep)

    def _pacer(self) -> ChunkPacer:
        return ChunkPacer(self.chunk_size, self.pause_s, self.sleep)

    @staticmethod
    async def _collect(tasks: List["asyncio.Task"]) -> List[EnrichmentResult]:
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

    async def dispatch_almost(self, points: Sequence[Any], enrich) -> List[EnrichmentResult]:
        """One concurrent enrichment call per point; results come back in input order."""
        call = almost(enrich)
        pacer = self._pacer()
        tasks: List[asyncio.Task] = []
        try:
            for point in points:
                tasks.append(asyncio.ensure_future(call(point)))
                await pacer.tick()
            await pacer.flush()
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        results = await self._collect(tasks)
        self._log_totals(results, pacer)
        return results

    async def scan_and_dispatch(
            self,
            sampler: RouteSampler,
            route: Route,
            target: float,
            enrich,
    ) -> Tuple[List[RoutePoint], List[EnrichmentResult]]:
        """
        Scans the route in worker mode and fires the enrichment call of each
        sample as soon as the sampler decides it.
        """
        call = almost(enrich)
        pacer = self._pacer()
        samples: List[RoutePoint] = []
        tasks: List[asyncio.Task] = []
        try:
            for sample in sampler.iter_adaptive(route, target):
                samples.append(sample)
                tasks.append(asyncio.ensure_future(call(sample)))
                await pacer.tick()
            await pacer.flush()
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        results = await self._collect(tasks)
        self._log_totals(results, pacer)
        return samples, results

    @staticmethod
    def _log_totals(results: List[EnrichmentResult], pacer: ChunkPacer) -> None:
        failed = sum(1 for r in results if r.failure)
        logger.info("Total number of requests: %d (failed: %d, pauses: %d)",
                    len(results), failed, pacer.pauses)
