# adonolam

A small web service that sets the 157 syllables of *Adon Olam* to a tune you
supply. Upload a MIDI file and choose a track; the note-on events of that
track become the pitches of the syllables. The service renders a WAV file,
stores it in an S3-compatible object store and gives back an audio player
for it.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Running the server

```
adonolam
```

By default the server listens on `0.0.0.0`, port 8080; `--host` and `--port`
change that. Open it in a browser, pick a file, enter the track number and
press *Upload*. The page then asks about the job once a second and swaps in
the result when the job is done.

Static files are served under `/static/` from a `static` directory in the
current working directory. Every other `GET` path returns the upload page.

### Configuration

Storage is configured from the environment (`StorageConfig.from_env`):

- `MINIO_ENDPOINT`: host and port of the object store
- `MINIO_DEFAULT_BUCKETS`: bucket the WAV files go into; it is created if missing
- `MINIO_ROOT_USER` and `MINIO_ROOT_PASSWORD`, or else `MINIO_ACCESS_KEY` and
  `MINIO_SECRET_KEY`: credentials for the store

With credentials, requests are signed with AWS Signature Version 4 and the
returned URL is presigned for one hour. Without them, requests are sent
unsigned and the returned URL is a plain one. Connections use plain HTTP.

## HTTP API

- `POST /api/upload` takes a multipart form with `uploadFile` (the MIDI file)
  and `trackNo` (an integer). It replies `202 Accepted`, sets the
  `X-Status-URL` header to the job's status URL and returns markup that polls
  that URL. A missing file or a track number that is not an integer gives
  `400`.
- `GET /api/status/<requestID>` returns the job's message: the audio player
  markup once the job has completed, or the error text. Unknown ids give `404`.
- `GET /api/status/<requestID>/tick` sends an `HX-Trigger: done` header when
  the job's state is `COMPLETED` or `ERRORED`. Unknown ids give `404`.

Job states (`adonolam.jobs.JobState`) are `NEW`, `COMPLETED`, `ERRORED` (the
file name was refused by `is_rejected_filename`) and `FAILED` (the MIDI data
could not be read, had no note-on events in the track, or the upload to the
store failed). A `FAILED` job does not send the `done` trigger, so the page
keeps polling.

## Using it as a library

```python
from adonolam.notes import read_note_on_keys, pitch_list
from adonolam.speech import make_speech

with open("tune.mid", "rb") as fh:
    keys = read_note_on_keys(fh.read(), track_no=1)

pitches = pitch_list(keys)   # exactly 157 frequencies, keys repeated as needed
wav_bytes = make_speech(pitches)
```

- `adonolam.notes`: `note_frequency`, `read_note_on_keys`, `pitch_list`,
  `is_rejected_filename`. Keys outside the table (C1 to B7) map to 0.0 Hz.
- `adonolam.speech`: `SYLLABLES`, `SyllableParams`, `build_syllables`,
  `SpeechSynthesizer` and `make_speech`.
- `adonolam.storage`: `StorageConfig`, `ObjectStorage` (`upload_wav`,
  `presigned_get_url`) and `StorageError`.
- `adonolam.jobs`: `JobStore`, `JobStatus`, `JobState`, `JobNotFoundError`,
  `generate_request_id`.
- `adonolam.processor`: `UploadJob` and `MidiProcessor`, which runs jobs
  directly with `process` or in a background thread with `start`, `submit`
  and `stop`.
- `adonolam.views`: `PageInfo`, `base_layout`, `index_page`.
- `adonolam.app`: `create_app` builds the Flask application; `main` serves it.

## What it does not do

`SpeechSynthesizer` does not pronounce the syllables. It writes a mono 16-bit
WAV with one sustained sine tone per syllable at that syllable's pitch
(0.3 seconds each at 22050 Hz by default); the syllable text and voice are
carried along in `SyllableParams` but do not change the sound. Job states are
kept in memory only and are lost when the server stops.