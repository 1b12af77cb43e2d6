"""The web application: upload form, upload endpoint and job status polling."""

from __future__ import annotations

import argparse
import os
import re

from flask import Flask, Response, request

from adonolam.jobs import JobNotFoundError, JobState, JobStatus, JobStore, generate_request_id
from adonolam.processor import MidiProcessor, UploadJob
from adonolam.storage import ObjectStorage, StorageConfig
from adonolam.views import index_page

_TRACK_NO = re.compile(r"[+-]?[0-9]+")

_ACCEPTED_BODY = """
    <div hx-trigger="done" hx-get="{url}" hx-swap="outerHTML" hx-target="this">
      <h3 role="status" id="pblabel" tabindex="-1" autofocus>Accepted, Running Operation</h3>
      <div hx-trigger="every 1s" hx-swap="none" hx-get="{url}/tick"></div>
    </div>"""


def _error(message: str, status: int) -> Response:
    response = Response(message + "\n", status, mimetype="text/plain")
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def create_app(store: JobStore | None = None, processor: MidiProcessor | None = None,
               static_folder: str = "static") -> Flask:
    """Build the application; without a processor one is made from the environment."""
    store = JobStore() if store is None else store
    if processor is None:
        processor = MidiProcessor(store, ObjectStorage(StorageConfig.from_env()))
        processor.start()

    app = Flask(__name__, static_folder=os.path.abspath(static_folder),
                static_url_path="/static")

    @app.get("/")
    @app.get("/<path:path>")
    def index(path: str = "") -> Response:
        return Response(index_page(), mimetype="text/html")

    @app.post("/api/upload")
    def upload() -> Response:
        request_id = generate_request_id()
        store.store(request_id, JobStatus(JobState.NEW))
        status_url = "/api/status/" + request_id
        uploaded = request.files.get("uploadFile")
        if uploaded is None:
            return _error("http: no such file", 400)
        raw_track = request.form.get("trackNo", "")
        if not _TRACK_NO.fullmatch(raw_track):
            return _error(f'invalid track number "{raw_track}"', 400)
        processor.submit(UploadJob(request_id, uploaded.read(), uploaded.filename or "",
                                   status_url, int(raw_track)))
        response = Response(_ACCEPTED_BODY.format(url=status_url), 202, mimetype="text/html")
        response.headers["X-Status-URL"] = status_url
        return response

    @app.get("/api/status/<request_id>")
    def job_status(request_id: str) -> Response:
        try:
            return Response(store.get(request_id).message, 200, mimetype="text/html")
        except JobNotFoundError as exc:
            return _error(str(exc), 404)

    @app.get("/api/status/<request_id>/tick")
    def job_tick(request_id: str) -> Response:
        try:
            status = store.get(request_id)
        except JobNotFoundError as exc:
            return _error(str(exc), 404)
        response = Response("", 200)
        if status.is_finished():
            response.headers["HX-Trigger"] = "done"
        return response

    return app


def main(argv: list[str] | None = None) -> None:
    """Serve the application over HTTP."""
    parser = argparse.ArgumentParser(prog="adonolam")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)
    create_app().run(host=args.host, port=args.port)