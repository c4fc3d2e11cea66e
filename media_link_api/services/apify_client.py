from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..models import Record, RunRecord

logger = logging.getLogger(__name__)


class PlatformResponseError(Exception):
    """Non-2xx answer from the task platform."""

    def __init__(self, action: str, status_code: int, body: str):
        super().__init__(f"{action}: {status_code} {body}")
        self.action = action
        self.status_code = status_code
        self.body = body


class ApifyClient:
    """Async wrapper over the actor/run/dataset endpoints of the task platform.

    The ``httpx.AsyncClient`` is owned by the caller (the application lifespan
    in production, a ``MockTransport``-backed client in tests).
    """

    def __init__(self, http: httpx.AsyncClient, token: str, base_url: str = "https://api.apify.com/v2"):
        self.http = http
        self.token = token
        self.base_url = base_url.rstrip("/")

    async def run_sync_get_dataset(self, task_id: str, url: str) -> List[Record]:
        resp = await self.http.post(
            self._url(f"/acts/{self._segment(task_id)}/run-sync-get-dataset"),
            params=self._params(),
            json={"url": url},
        )
        self._raise_for_status(resp, "run-sync-get-dataset returned non-ok")
        return self._records(resp.json())

    async def start_run(self, task_id: str, url: str) -> str:
        resp = await self.http.post(
            self._url(f"/acts/{self._segment(task_id)}/runs"),
            params=self._params(),
            json={"url": url},
        )
        self._raise_for_status(resp, "Failed to start actor run")
        payload = resp.json()
        data = payload.get("data") if isinstance(payload, dict) else None
        run_id = data.get("id") if isinstance(data, dict) else None
        if not run_id and isinstance(payload, dict):
            run_id = payload.get("id")
        if not run_id:
            raise PlatformResponseError("No run id returned when starting run", resp.status_code, resp.text)
        return str(run_id)

    async def get_run(self, run_id: str) -> tuple[RunRecord, Dict[str, Any]]:
        """Return the parsed run and the raw status payload."""
        resp = await self.http.get(self._url(f"/actor-runs/{self._segment(run_id)}"), params=self._params())
        self._raise_for_status(resp, "Failed to query actor run")
        payload = resp.json()
        data = payload.get("data") if isinstance(payload, dict) else None
        return RunRecord.model_validate(data or {}), payload

    async def get_dataset_items(self, dataset_id: str) -> List[Record]:
        resp = await self.http.get(
            self._url(f"/datasets/{self._segment(dataset_id)}/items"),
            params=self._params(format="json", clean="true"),
        )
        self._raise_for_status(resp, "Failed to fetch dataset")
        return self._records(resp.json())

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _params(self, **extra: str) -> Dict[str, str]:
        return {**extra, "token": self.token}

    @staticmethod
    def _segment(value: str) -> str:
        # "/" stays literal: owner/name is a valid path form of an actor id.
        return quote(value, safe="/~")

    @staticmethod
    def _raise_for_status(resp: httpx.Response, action: str) -> None:
        if not resp.is_success:
            raise PlatformResponseError(action, resp.status_code, resp.text)

    @staticmethod
    def _records(payload: Any) -> List[Record]:
        if isinstance(payload, dict):
            items: Optional[Any] = payload.get("items")
            if items is None:
                # A bare object is a single record-bearing payload.
                return [payload] if payload else []
            payload = items
        if not isinstance(payload, list):
            return []
        return [item for item in payload if isinstance(item, dict)]
