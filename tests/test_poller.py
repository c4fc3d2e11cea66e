from pathlib import Path
import asyncio
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from media_link_api.errors import MissingDataset, PollTimeout, RunFailed
from media_link_api.models import RunRecord
from media_link_api.services.apify_client import PlatformResponseError
from media_link_api.services.poller import PollState, poll_run_for_dataset


class ScriptedRuns:
    """Answers status queries from a fixed list of statuses, repeating the last one."""

    def __init__(self, statuses, dataset_id="ds-1"):
        self.statuses = statuses
        self.dataset_id = dataset_id
        self.queries = 0

    async def get_run(self, run_id):
        status = self.statuses[min(self.queries, len(self.statuses) - 1)]
        self.queries += 1
        if isinstance(status, Exception):
            raise status
        data = {"id": run_id, "status": status}
        if status == "SUCCEEDED" and self.dataset_id:
            data["defaultDatasetId"] = self.dataset_id
        return RunRecord.model_validate(data), {"data": data}


def _poll(client, max_attempts=30, sleeps=None):
    async def fake_sleep(seconds):
        if sleeps is not None:
            sleeps.append(seconds)

    return asyncio.run(
        poll_run_for_dataset(client, "run-1", max_attempts=max_attempts, interval_ms=3000, sleep=fake_sleep)
    )


@pytest.mark.parametrize("k", [1, 2, 7, 30])
def test_success_on_attempt_k_queries_exactly_k_times(k):
    client = ScriptedRuns(["RUNNING"] * (k - 1) + ["SUCCEEDED"])
    sleeps = []

    assert _poll(client, sleeps=sleeps) == "ds-1"
    assert client.queries == k
    assert sleeps == [3.0] * (k - 1)


def test_timeout_after_max_attempts():
    client = ScriptedRuns(["RUNNING"])
    sleeps = []

    with pytest.raises(PollTimeout) as excinfo:
        _poll(client, max_attempts=5, sleeps=sleeps)

    assert client.queries == 5
    assert excinfo.value.attempts == 5
    assert len(sleeps) == 4


@pytest.mark.parametrize("k", [1, 4])
def test_failed_run_stops_polling(k):
    client = ScriptedRuns(["READY"] * (k - 1) + ["FAILED"])

    with pytest.raises(RunFailed) as excinfo:
        _poll(client)

    assert client.queries == k
    assert excinfo.value.payload["data"]["status"] == "FAILED"
    assert "FAILED" in str(excinfo.value)


def test_succeeded_without_dataset_is_an_error():
    client = ScriptedRuns(["SUCCEEDED"], dataset_id=None)

    with pytest.raises(MissingDataset):
        _poll(client)
    assert client.queries == 1


def test_non_ok_status_answer_keeps_polling():
    client = ScriptedRuns([PlatformResponseError("Failed to query actor run", 404, "{}"), "SUCCEEDED"])

    assert _poll(client) == "ds-1"
    assert client.queries == 2


def test_poll_state_transitions():
    state = PollState(status=None, attempts_remaining=2)

    running = state.advance("RUNNING")
    assert running.attempts_remaining == 1
    assert not running.succeeded and not running.failed

    assert running.advance("SUCCEEDED").succeeded
    assert running.advance("FAILED").failed
    assert state.attempts_remaining == 2
