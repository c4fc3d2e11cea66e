from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx

from ..errors import InvocationError, PollError
from ..models import Record
from .apify_client import ApifyClient, PlatformResponseError
from .poller import Sleep, poll_run_for_dataset

logger = logging.getLogger(__name__)

# Transport failures, non-2xx answers, undecodable bodies and poll outcomes.
STRATEGY_ERRORS = (httpx.HTTPError, PlatformResponseError, PollError, ValueError)


@dataclass
class StrategyOutcome:
    records: Optional[List[Record]] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.records is not None


Strategy = Callable[[ApifyClient, str, str], Awaitable[StrategyOutcome]]


async def run_sync_strategy(client: ApifyClient, task_id: str, url: str) -> StrategyOutcome:
    try:
        records = await client.run_sync_get_dataset(task_id, url)
    except STRATEGY_ERRORS as exc:
        logger.warning("run-sync-get-dataset failed for %s: %s", task_id, exc)
        return StrategyOutcome(error=exc)
    return StrategyOutcome(records=records)


def run_and_poll_strategy(max_attempts: int = 30, interval_ms: int = 3000, sleep: Sleep = asyncio.sleep) -> Strategy:
    async def strategy(client: ApifyClient, task_id: str, url: str) -> StrategyOutcome:
        try:
            run_id = await client.start_run(task_id, url)
            logger.info("Started run %s for %s", run_id, task_id)
            dataset_id = await poll_run_for_dataset(client, run_id, max_attempts, interval_ms, sleep=sleep)
            records = await client.get_dataset_items(dataset_id)
        except STRATEGY_ERRORS as exc:
            return StrategyOutcome(error=exc)
        return StrategyOutcome(records=records)

    return strategy


def default_strategies(max_attempts: int = 30, interval_ms: int = 3000, sleep: Sleep = asyncio.sleep) -> List[Strategy]:
    return [run_sync_strategy, run_and_poll_strategy(max_attempts, interval_ms, sleep)]


async def invoke(
    client: ApifyClient,
    task_id: str,
    url: str,
    strategies: Optional[Sequence[Strategy]] = None,
) -> List[Record]:
    """Run the strategies in order and return the records of the first that succeeds."""
    last_error: Optional[Exception] = None
    for strategy in strategies if strategies is not None else default_strategies():
        outcome = await strategy(client, task_id, url)
        if outcome.ok:
            return outcome.records
        last_error = outcome.error
    raise InvocationError(f"Invocation failed for {task_id}", details=str(last_error)) from last_error


def identifier_encodings(task_id: str) -> List[str]:
    """``owner/name`` is also tried as ``owner~name``; both are assumed to alias the same actor."""
    if "/" in task_id:
        return [task_id, task_id.replace("/", "~", 1)]
    return [task_id]


async def invoke_with_alternate(
    client: ApifyClient,
    task_id: str,
    url: str,
    strategies: Optional[Sequence[Strategy]] = None,
) -> List[Record]:
    last_error: Optional[InvocationError] = None
    for attempt, identifier in enumerate(identifier_encodings(task_id)):
        if attempt:
            logger.warning("Retrying with actor slug: %s", identifier)
        try:
            return await invoke(client, identifier, url, strategies)
        except InvocationError as exc:
            logger.warning("Invocation failed with actor slug %s: %s", identifier, exc.details)
            last_error = exc
    raise last_error
