"""Disk-backed storage for uploaded memo attachments.

Files land under ``<upload_dir>/YYYY/MM/DD/<ms>-<random>-<name>`` and are
served back by the ``/uploads`` static mount.
"""

import logging
import random
import shutil
import socket
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Callable, Optional
from urllib.parse import quote

from memobbs.core import clock

logger = logging.getLogger(__name__)

UPLOADS_URL_PATH = "/uploads"


@dataclass(frozen=True)
class StoredResource:
    url: str
    type: str
    name: str
    size: int
    relative_path: str


def detect_local_ip() -> str:
    """First non-loopback IPv4 address of this host, or ``localhost``."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            # No packet is sent; connect() only selects the outbound interface
            sock.connect(("10.255.255.255", 1))
            address = sock.getsockname()[0]
    except OSError:
        return "localhost"
    if address.startswith("127.") or address == "0.0.0.0":
        return "localhost"
    return address


def safe_filename(filename: str) -> str:
    """Strip directory components and control characters from a client-supplied name."""
    name = filename.replace("\\", "/").split("/")[-1]
    name = "".join(ch for ch in name if ch.isprintable()).strip()
    if name in ("", ".", ".."):
        return "file"
    return name


class ResourceStore:
    """Writes uploads into a date-partitioned directory tree."""

    def __init__(
        self,
        upload_dir: str,
        base_url: str,
        now: Callable[[], datetime] = clock.now_cst,
    ):
        self.root = Path(upload_dir)
        self.base_url = base_url.rstrip("/")
        self.now = now

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def _unique_name(self, filename: str, moment: datetime) -> str:
        millis = int(moment.timestamp() * 1000)
        return f"{millis}-{random.randint(0, 10**9)}-{safe_filename(filename)}"

    def url_for(self, relative_path: str) -> str:
        return f"{self.base_url}{UPLOADS_URL_PATH}/{quote(relative_path)}"

    def save(self, stream: BinaryIO, filename: str, content_type: Optional[str]) -> StoredResource:
        """Copy ``stream`` to disk and describe the stored file.

        Filesystem errors propagate as ``OSError``; a partially written file
        may remain.
        """
        moment = self.now()
        day_dir = PurePosixPath(f"{moment:%Y}", f"{moment:%m}", f"{moment:%d}")
        relative_path = day_dir / self._unique_name(filename, moment)

        target = self.root.joinpath(*relative_path.parts)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as fh:
            shutil.copyfileobj(stream, fh)
        size = target.stat().st_size

        stored = StoredResource(
            url=self.url_for(relative_path.as_posix()),
            type=content_type or "application/octet-stream",
            name=filename,
            size=size,
            relative_path=relative_path.as_posix(),
        )
        logger.info(f"File uploaded successfully: {stored.relative_path} ({stored.size} bytes)")
        return stored


def public_base_url(server_url: Optional[str], port: int) -> str:
    """Configured server URL, or one built from the detected LAN address."""
    if server_url:
        return server_url.rstrip("/")
    return f"http://{detect_local_ip()}:{port}"
