"""HedgeDoc download: fetch a document's Markdown into a local file"""

import logging
import tempfile
from pathlib import Path
from typing import Optional

import requests

from pretty.errors import DownloadStatusError, DownloadTransportError, DownloadWriteError


log = logging.getLogger(__name__)

TIMEOUT = 60
TMP_FILE_NAME = "pretty.md"


def default_tmp_file() -> Path:
    return Path(tempfile.gettempdir()) / TMP_FILE_NAME


def document_url(domain: str, document_id: str) -> str:
    """HedgeDoc raw-download URL for a document."""
    return f"{domain.rstrip('/')}/{document_id}/download"


def fetch_markdown(url: str, dest: Optional[Path] = None, timeout: float = TIMEOUT) -> Path:
    """GET url once and write the body to dest. Returns dest."""
    dest = dest or default_tmp_file()
    log.info("Downloading %s", url)
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise DownloadTransportError(url, e) from e

    if not 200 <= resp.status_code < 300:
        raise DownloadStatusError(url, resp.status_code)

    try:
        dest.write_text(resp.text, encoding="utf-8")
    except OSError as e:
        raise DownloadWriteError(dest, e) from e
    log.debug("Saved %s", dest)
    return dest
