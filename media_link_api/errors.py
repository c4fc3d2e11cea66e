from typing import Any, Optional

import orjson


class MediaLinkError(Exception):
    status_code = 500
    code = "server_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InputError(MediaLinkError):
    status_code = 400
    code = "input_error"


class ConfigError(MediaLinkError):
    status_code = 500
    code = "config_error"


class InvocationError(MediaLinkError):
    """Every strategy failed for a task identifier (or for all of its encodings)."""

    status_code = 500
    code = "invocation_error"


class EmptyResultError(MediaLinkError):
    status_code = 404
    code = "empty_result"


class PollError(Exception):
    pass


class RunFailed(PollError):
    def __init__(self, run_id: str, payload: Any):
        super().__init__(f"Actor run {run_id} failed: {orjson.dumps(payload).decode()}")
        self.run_id = run_id
        self.payload = payload


class PollTimeout(PollError):
    def __init__(self, run_id: str, attempts: int):
        super().__init__(f"Timeout waiting for actor run {run_id} to finish after {attempts} attempts")
        self.run_id = run_id
        self.attempts = attempts


class MissingDataset(PollError):
    def __init__(self, run_id: str):
        super().__init__(f"No datasetId returned after run {run_id} succeeded")
        self.run_id = run_id
