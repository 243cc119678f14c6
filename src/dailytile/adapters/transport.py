"""Concrete transports for the single daily-note slot."""

import json
import logging
from pathlib import Path
from typing import Any

import requests

from ..core.cache import SyncCache
from ..core.errors import MalformedRecord, TransportFailure
from ..core.model import TransportRecord
from ..core.ports import Transport

logger = logging.getLogger(__name__)


class FileTransport(Transport):
    """Replace a JSON drop file; the receiver picks it up with ``read_drop``."""

    def __init__(self, out: Path):
        self.out = out

    def send(self, path: str, record: TransportRecord, urgent: bool = False) -> None:
        payload = {"path": path, **record.to_dict()}
        tmp_path = self.out.with_suffix(self.out.suffix + ".tmp")
        try:
            self.out.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(self.out)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise TransportFailure(f"Writing {self.out} failed: {e}") from e


def read_drop(drop: Path) -> dict[str, Any] | None:
    """Load the record left by FileTransport, or None if nothing was dropped."""
    if not drop.exists():
        return None
    try:
        data = json.loads(drop.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedRecord(f"Unreadable drop file {drop}: {e}") from e
    if not isinstance(data, dict):
        raise MalformedRecord(f"Drop file {drop} does not hold a JSON object")
    return data


class HttpTransport(Transport):
    """PUT the record to a receiver running ``dailytile serve``."""

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, path: str, record: TransportRecord, urgent: bool = False) -> None:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if urgent:
            # RFC 9218 extensible priority: highest urgency
            headers["Priority"] = "u=0"

        try:
            resp = self.session.put(
                self.url,
                data=json.dumps(record.to_dict(), ensure_ascii=False).encode("utf-8"),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportFailure(f"PUT {self.url} failed: {e}") from e

        if not resp.ok:
            raise TransportFailure(f"PUT {self.url} returned HTTP {resp.status_code}")
        logger.debug("PUT %s -> %s", self.url, resp.status_code)


class LoopbackTransport(Transport):
    """Deliver straight into a cache living in the same process."""

    def __init__(self, cache: SyncCache):
        self.cache = cache

    def send(self, path: str, record: TransportRecord, urgent: bool = False) -> None:
        self.cache.apply(record)
