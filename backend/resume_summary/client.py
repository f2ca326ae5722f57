"""Command-line client: upload a resume and poll until its summary is ready.

    python -m resume_summary.client path/to/resume.pdf --url http://localhost:8000
"""
import argparse
import json
import logging
import mimetypes
import sys
import time
from pathlib import Path

import requests

from .logging_config import configure_logging

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 30
POLL_INTERVAL = 1.0
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class ResumeClientError(Exception):
    pass


class PollTimeoutError(ResumeClientError):
    pass


def _detail(res: requests.Response, fallback: str) -> str:
    try:
        return res.json().get("detail") or fallback
    except (ValueError, AttributeError):
        return fallback


class ResumeClient:
    def __init__(self, base_url: str = "http://localhost:8000", session=None, timeout: float = 30.0,
                 max_upload_bytes: int = MAX_UPLOAD_BYTES):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_upload_bytes = max_upload_bytes

    def upload(self, path: Path, content_type: str | None = None) -> dict:
        if path.stat().st_size > self.max_upload_bytes:
            limit = self.max_upload_bytes
            label = f"{limit // (1024 * 1024)}MB" if limit % (1024 * 1024) == 0 else f"{limit} bytes"
            raise ResumeClientError(f"File size must be less than {label}.")
        content_type = content_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        with open(path, "rb") as fh:
            res = self.session.post(
                f"{self.base_url}/api/resumes/upload",
                files={"resume": (path.name, fh, content_type)},
                timeout=self.timeout,
            )
        if not res.ok:
            raise ResumeClientError(_detail(res, "Upload failed"))
        return res.json()

    def fetch_summary(self, resume_id: str) -> dict | None:
        """Return the summary, or None while the resume is still processing."""
        res = self.session.get(f"{self.base_url}/api/resumes/{resume_id}/summary", timeout=self.timeout)
        if res.status_code == 202:
            return None
        if not res.ok:
            raise ResumeClientError(_detail(res, "Failed to fetch summary"))
        return res.json()

    def wait_for_summary(self, resume_id: str, max_attempts: int = MAX_ATTEMPTS,
                         interval: float = POLL_INTERVAL, sleep=time.sleep) -> dict:
        for attempt in range(1, max_attempts + 1):
            summary = self.fetch_summary(resume_id)
            if summary is not None:
                return summary
            logger.debug("Resume %s still processing (attempt %d/%d)", resume_id, attempt, max_attempts)
            if attempt < max_attempts:
                sleep(interval)
        raise PollTimeoutError("Processing timeout. Please try again.")

    def summarize(self, path: Path, **poll_kwargs) -> dict:
        job = self.upload(path)
        logger.info("Uploaded %s as %s", job.get("fileName"), job["id"])
        return self.wait_for_summary(job["id"], **poll_kwargs)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Upload a resume and print its AI summary")
    parser.add_argument("file", type=Path, help="PDF or TXT resume")
    parser.add_argument("--url", default="http://localhost:8000", help="server base URL")
    parser.add_argument("--attempts", type=int, default=MAX_ATTEMPTS)
    parser.add_argument("--interval", type=float, default=POLL_INTERVAL)
    args = parser.parse_args(argv)

    configure_logging()
    client = ResumeClient(args.url)
    try:
        summary = client.summarize(args.file, max_attempts=args.attempts, interval=args.interval)
    except (ResumeClientError, requests.exceptions.RequestException, OSError) as e:
        logger.error("%s", e)
        return 1
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
