"""Tracking the state of background jobs by request id."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum


class JobState(str, Enum):
    NEW = "NEW"
    COMPLETED = "COMPLETED"
    ERRORED = "ERRORED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class JobStatus:
    state: JobState
    message: str = ""
    job_url: str = ""

    def is_finished(self) -> bool:
        """True when polling clients should stop waiting for this job."""
        return self.state in (JobState.COMPLETED, JobState.ERRORED)


class JobNotFoundError(LookupError):
    def __init__(self, request_id: str) -> None:
        super().__init__("Request id not found\n")
        self.request_id = request_id


class JobStore:
    """Mapping of request ids to job statuses."""

    def __init__(self) -> None:
        self._statuses: dict[str, JobStatus] = {}

    def store(self, request_id: str, status: JobStatus) -> None:
        self._statuses[request_id] = status

    def get(self, request_id: str) -> JobStatus:
        try:
            return self._statuses[request_id]
        except KeyError:
            raise JobNotFoundError(request_id) from None

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._statuses

    def __len__(self) -> int:
        return len(self._statuses)


def generate_request_id() -> str:
    """Return a new random request id: a UUID without dashes."""
    return uuid.uuid4().hex