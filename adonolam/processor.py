"""Background processing of uploaded MIDI files into sung audio."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass

from adonolam.jobs import JobState, JobStatus, JobStore
from adonolam.notes import is_rejected_filename, pitch_list, read_note_on_keys
from adonolam.speech import SpeechSynthesizer, make_speech
from adonolam.storage import ObjectStorage, StorageError

logger = logging.getLogger(__name__)

_STOP = object()


@dataclass(frozen=True)
class UploadJob:
    request_id: str
    data: bytes
    filename: str
    status_url: str
    track_no: int


class MidiProcessor:
    """Turns upload jobs into stored audio and records each job's outcome."""

    def __init__(self, store: JobStore, storage: ObjectStorage,
                 synthesizer: SpeechSynthesizer | None = None) -> None:
        self.store = store
        self.storage = storage
        self.synthesizer = synthesizer or SpeechSynthesizer()
        self._queue: queue.Queue[object] = queue.Queue()
        self._thread: threading.Thread | None = None

    def process(self, job: UploadJob) -> JobStatus:
        """Process ``job`` now, record its final status and return it."""
        if is_rejected_filename(job.filename):
            status = JobStatus(JobState.ERRORED, "Not a midi file.", job.status_url)
        else:
            try:
                keys = read_note_on_keys(job.data, job.track_no)
                wav = make_speech(pitch_list(keys), self.synthesizer)
                uri = self.storage.upload_wav(wav, job.filename)
                status = JobStatus(
                    JobState.COMPLETED,
                    f"<audio controls><source src='{uri}' type='audio/wave' /></audio>",
                    job.status_url,
                )
            except (ValueError, OSError, StorageError) as exc:
                status = JobStatus(JobState.FAILED, str(exc), job.status_url)
        self.store.store(job.request_id, status)
        return status

    def submit(self, job: UploadJob) -> None:
        self._queue.put(job)

    def _work(self) -> None:
        while (job := self._queue.get()) is not _STOP:
            try:
                self.process(job)
            except Exception as exc:  # keep the worker alive for later jobs
                logger.exception("processing %s failed", job.request_id)
                self.store.store(job.request_id,
                                 JobStatus(JobState.FAILED, str(exc), job.status_url))

    def start(self) -> None:
        """Start the background worker if it is not running."""
        if self._thread is None or not self._thread.is_alive():
            self._thread = threading.Thread(target=self._work, daemon=True)
            self._thread.start()

    def stop(self) -> None:
        """Finish the queued jobs and stop the background worker."""
        if self._thread is not None:
            self._queue.put(_STOP)
            self._thread.join()
            self._thread = None