import string
import threading

import pytest

from adonolam.jobs import (
    JobNotFoundError,
    JobState,
    JobStatus,
    JobStore,
    generate_request_id,
)


def test_store_then_get_round_trip():
    store = JobStore()
    status = JobStatus(JobState.COMPLETED, message="done", job_url="/api/status/abc")
    store.store("abc", status)
    assert store.get("abc") == status


def test_store_overwrites_previous_status():
    store = JobStore()
    store.store("id1", JobStatus(JobState.NEW))
    store.store("id1", JobStatus(JobState.ERRORED, message="Not a midi file."))
    assert store.get("id1").state is JobState.ERRORED
    assert store.get("id1").message == "Not a midi file."
    assert len(store) == 1


def test_missing_id_raises():
    store = JobStore()
    with pytest.raises(JobNotFoundError) as info:
        store.get("nope")
    assert str(info.value) == "Request id not found\n"
    assert info.value.request_id == "nope"


def test_not_found_is_lookup_error():
    with pytest.raises(LookupError):
        JobStore().get("x")


def test_contains():
    store = JobStore()
    store.store("a", JobStatus(JobState.NEW))
    assert "a" in store
    assert "b" not in store


@pytest.mark.parametrize(
    "state, finished",
    [
        (JobState.NEW, False),
        (JobState.COMPLETED, True),
        (JobState.ERRORED, True),
        (JobState.FAILED, False),
    ],
)
def test_is_finished(state, finished):
    assert JobStatus(state).is_finished() is finished


@pytest.mark.parametrize(
    "name, finished",
    [("NEW", False), ("COMPLETED", True), ("ERRORED", True), ("FAILED", False)],
)
def test_status_built_from_state_name(name, finished):
    store = JobStore()
    store.store("job", JobStatus(JobState(name)))
    status = store.get("job")
    assert status.state.value == name
    assert status.is_finished() is finished


def test_status_defaults():
    status = JobStatus(JobState.NEW)
    assert status.message == ""
    assert status.job_url == ""


def test_generate_request_id_shape():
    request_id = generate_request_id()
    assert len(request_id) == 32
    assert "-" not in request_id
    assert set(request_id) <= set(string.hexdigits.lower())


def test_generate_request_id_unique():
    ids = {generate_request_id() for _ in range(200)}
    assert len(ids) == 200


def test_concurrent_stores():
    store = JobStore()

    def worker(prefix):
        for n in range(100):
            store.store(f"{prefix}-{n}", JobStatus(JobState.NEW))

    threads = [threading.Thread(target=worker, args=(p,)) for p in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store) == 800
    assert store.get("7-99").state is JobState.NEW