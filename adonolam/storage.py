"""Uploading rendered audio to an S3-compatible object store."""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

_ALGORITHM = "AWS4-HMAC-SHA256"
_MAX_EXPIRY = 7 * 24 * 3600


class StorageError(Exception):
    """Raised when the object store refuses or fails a request."""


@dataclass(frozen=True)
class StorageConfig:
    endpoint: str
    bucket: str
    access_key: str = ""
    secret_key: str = ""
    secure: bool = False
    region: str = "us-east-1"

    @property
    def has_credentials(self) -> bool:
        return bool(self.access_key and self.secret_key)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StorageConfig:
        """Read the configuration from MINIO_* environment variables."""
        env = os.environ if environ is None else environ
        keys = ("", "")
        for user, pw in (("MINIO_ROOT_USER", "MINIO_ROOT_PASSWORD"),
                         ("MINIO_ACCESS_KEY", "MINIO_SECRET_KEY")):
            if env.get(user) and env.get(pw):
                keys = (env[user], env[pw])
                break
        return cls(env.get("MINIO_ENDPOINT", ""), env.get("MINIO_DEFAULT_BUCKETS", ""), *keys)


def _query(params: Mapping[str, str]) -> str:
    return "&".join(
        f"{quote(k, safe='-_.~')}={quote(v, safe='-_.~')}" for k, v in sorted(params.items())
    )


def _hmac(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode(), hashlib.sha256).digest()


class ObjectStorage:
    """Client for the few object-store operations the service needs."""

    def __init__(
        self,
        config: StorageConfig,
        session: requests.Session | None = None,
        timeout: float = 50.0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self._session = session or requests.Session()
        self._timeout = timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._base_url = f"{'https' if config.secure else 'http'}://{config.endpoint}"

    def _path(self, obj: str | None = None) -> str:
        path = "/" + quote(self.config.bucket, safe="")
        return path if obj is None else f"{path}/{quote(obj, safe='/')}"

    def _validate(self) -> None:
        if not self.config.endpoint:
            raise StorageError("minio.New: endpoint is empty")
        if not self.config.bucket:
            raise StorageError("bucket doesn't exist: bucket name cannot be empty")

    def _stamp(self) -> tuple[str, str]:
        now = self._clock().astimezone(timezone.utc)
        scope = f"{now:%Y%m%d}/{self.config.region}/s3/aws4_request"
        return f"{now:%Y%m%dT%H%M%SZ}", scope

    def _sign(self, amz_date: str, scope: str, canonical_request: str) -> str:
        to_sign = "\n".join(
            [_ALGORITHM, amz_date, scope, hashlib.sha256(canonical_request.encode()).hexdigest()]
        )
        key = ("AWS4" + self.config.secret_key).encode()
        for part in (scope.split("/", 1)[0], self.config.region, "s3", "aws4_request"):
            key = _hmac(key, part)
        return hmac.new(key, to_sign.encode(), hashlib.sha256).hexdigest()

    def _request(self, method: str, obj: str | None = None, body: bytes = b"",
                 content_type: str | None = None) -> requests.Response:
        path = self._path(obj)
        headers: dict[str, str] = {}
        if self.config.has_credentials:
            payload_hash = hashlib.sha256(body).hexdigest()
            amz_date, scope = self._stamp()
            signed = {"host": self.config.endpoint, "x-amz-content-sha256": payload_hash,
                      "x-amz-date": amz_date}
            names = ";".join(sorted(signed))
            canonical = "\n".join([
                method, path, "", "".join(f"{k}:{signed[k]}\n" for k in sorted(signed)),
                names, payload_hash,
            ])
            headers = {
                "x-amz-content-sha256": payload_hash,
                "x-amz-date": amz_date,
                "Authorization": f"{_ALGORITHM} Credential={self.config.access_key}/{scope}, "
                f"SignedHeaders={names}, Signature={self._sign(amz_date, scope, canonical)}",
            }
        if content_type:
            headers["Content-Type"] = content_type
        try:
            return self._session.request(method, self._base_url + path, data=body,
                                         headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise StorageError(str(exc)) from exc

    def upload_wav(self, data: bytes, file_name: str) -> str:
        """Store ``data`` as ``<file_name>.wav`` and return a presigned URL for it."""
        self._validate()
        obj = f"{file_name}.wav"
        logger.info("bucket %s, object %s", self.config.bucket, obj)
        try:
            head = self._request("HEAD")
        except StorageError as exc:
            raise StorageError(f"bucket doesn't exist: {exc}") from exc
        if head.status_code == 404:
            if not self._request("PUT").ok:
                raise StorageError(f"could not create bucket {self.config.bucket}")
        elif not head.ok:
            raise StorageError(f"bucket doesn't exist: HTTP {head.status_code}")
        response = self._request("PUT", obj, bytes(data), "audio/wav")
        if not response.ok:
            raise StorageError(f"could not upload {obj}: HTTP {response.status_code}")
        logger.info("File %s uploaded successfully", file_name)
        return self.presigned_get_url(obj)

    def presigned_get_url(self, obj: str, expires: timedelta = timedelta(hours=1)) -> str:
        """Return a URL that grants GET access to a WAV object for ``expires``."""
        self._validate()
        seconds = int(expires.total_seconds())
        if not 1 <= seconds <= _MAX_EXPIRY:
            raise ValueError(f"expiry must be between 1 and {_MAX_EXPIRY} seconds")
        path = self._path(obj)
        params = {"ContentType": "audio/wav"}
        if not self.config.has_credentials:
            return f"{self._base_url}{path}?{_query(params)}"
        amz_date, scope = self._stamp()
        params.update({
            "X-Amz-Algorithm": _ALGORITHM,
            "X-Amz-Credential": f"{self.config.access_key}/{scope}",
            "X-Amz-Date": amz_date,
            "X-Amz-Expires": str(seconds),
            "X-Amz-SignedHeaders": "host",
        })
        query = _query(params)
        canonical = "\n".join(
            ["GET", path, query, f"host:{self.config.endpoint}\n", "host", "UNSIGNED-PAYLOAD"]
        )
        return f"{self._base_url}{path}?{query}&X-Amz-Signature={self._sign(amz_date, scope, canonical)}"