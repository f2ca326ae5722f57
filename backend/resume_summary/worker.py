import asyncio
import logging
from typing import Protocol

from starlette.concurrency import run_in_threadpool

from .job_store import ResumeJobStore
from .models import ResumeSummary
from .utils import resume_parser

logger = logging.getLogger(__name__)


class Summarizer(Protocol):
    def summarize(self, resume_text: str, resume_id: str) -> ResumeSummary: ...


class ResumeProcessor:
    """Runs extraction and summarization for uploaded resumes, one task per job.

    Tasks are fire-and-forget from the uploader's point of view; the processor
    keeps a handle on each so ``drain`` can wait for them.
    """

    def __init__(self, store: ResumeJobStore, summarizer: Summarizer):
        self.store = store
        self.summarizer = summarizer
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, resume_id: str, content: bytes, content_type: str) -> asyncio.Task:
        task = asyncio.create_task(self.process(resume_id, content, content_type), name=f"process-{resume_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def process(self, resume_id: str, content: bytes, content_type: str) -> None:
        job = self.store.get(resume_id)
        if job is None or job.status != "processing":
            logger.warning("Skipping resume %s: not awaiting processing", resume_id)
            return

        try:
            text = await run_in_threadpool(resume_parser.parse_resume, content, content_type)
            self.store.update(resume_id, text=text)

            summary = await run_in_threadpool(self.summarizer.summarize, text, resume_id)
            self.store.update(resume_id, status="completed", summary=summary)
        except Exception:
            logger.exception("Processing error for resume %s", resume_id)
            current = self.store.get(resume_id)
            if current is not None and current.status == "processing":
                self.store.update(resume_id, status="error")
            return

        logger.info("Resume %s processed", resume_id)
