from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Optional

from ..errors import MissingDataset, PollTimeout, RunFailed
from .apify_client import ApifyClient, PlatformResponseError

logger = logging.getLogger(__name__)

SUCCEEDED = "SUCCEEDED"
FAILED = "FAILED"

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class PollState:
    status: Optional[str]
    attempts_remaining: int

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.status == FAILED

    def advance(self, status: Optional[str]) -> "PollState":
        """Consume one status query."""
        return replace(self, status=status, attempts_remaining=self.attempts_remaining - 1)


async def poll_run_for_dataset(
    client: ApifyClient,
    run_id: str,
    max_attempts: int = 30,
    interval_ms: int = 3000,
    sleep: Sleep = asyncio.sleep,
) -> str:
    """Query the run until it reaches SUCCEEDED or FAILED and return its dataset id.

    Fixed interval between queries, no backoff. Raises ``RunFailed``,
    ``PollTimeout`` or ``MissingDataset``.
    """
    state = PollState(status=None, attempts_remaining=max_attempts)
    while state.attempts_remaining > 0:
        try:
            run, payload = await client.get_run(run_id)
            status = run.status
        except PlatformResponseError as exc:
            # Non-2xx status answers count as non-terminal.
            logger.warning("Status query for run %s returned %s, polling on", run_id, exc.status_code)
            run, payload, status = None, None, None

        state = state.advance(status)
        if state.succeeded:
            if not run.dataset_id:
                raise MissingDataset(run_id)
            return run.dataset_id
        if state.failed:
            raise RunFailed(run_id, payload)

        logger.debug("Run %s is %s, %d attempts left", run_id, status, state.attempts_remaining)
        if state.attempts_remaining > 0:
            await sleep(interval_ms / 1000)

    raise PollTimeout(run_id, max_attempts)
