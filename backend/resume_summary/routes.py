import logging
import random
import string
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from .config import Settings
from .job_store import ResumeJobStore
from .models import Resume
from .utils.resume_parser import SUPPORTED_MEDIA_TYPES
from .worker import ResumeProcessor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resumes")

_ID_ALPHABET = string.digits + string.ascii_lowercase


def get_store(request: Request) -> ResumeJobStore:
    return request.app.state.store


def get_processor(request: Request) -> ResumeProcessor:
    return request.app.state.processor


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def new_resume_id(store: ResumeJobStore) -> str:
    # epoch millis + random base36 suffix; retry on the (unlikely) collision
    while True:
        suffix = "".join(random.choices(_ID_ALPHABET, k=9))
        resume_id = f"resume-{int(time.time() * 1000)}-{suffix}"
        if resume_id not in store:
            return resume_id


def _size_label(size: int) -> str:
    mib = 1024 * 1024
    return f"{size // mib}MB" if size % mib == 0 else f"{size} bytes"


def _media_type(upload: UploadFile) -> str:
    return (upload.content_type or "").split(";")[0].strip().lower()


@router.post("/upload")
async def upload_resume(
    resume: UploadFile | None = File(None),
    store: ResumeJobStore = Depends(get_store),
    processor: ResumeProcessor = Depends(get_processor),
    settings: Settings = Depends(get_settings),
):
    if resume is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    content_type = _media_type(resume)
    if content_type not in SUPPORTED_MEDIA_TYPES:
        raise HTTPException(status_code=400, detail="Invalid file type. Only PDF and TXT files are allowed.")

    try:
        content = await resume.read()
    except Exception:
        logger.exception("Upload error")
        raise HTTPException(status_code=500, detail="Failed to upload file")
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File size must be less than {_size_label(settings.max_upload_bytes)}.",
        )

    created = False
    try:
        job = Resume(
            id=new_resume_id(store),
            fileName=resume.filename or "",
            uploadDate=datetime.now(timezone.utc).isoformat(),
            status="processing",
        )
        store.create(job)
        created = True
        processor.submit(job.id, content, content_type)
    except Exception:
        logger.exception("Upload error")
        # no worker will ever pick the job up
        if created:
            store.update(job.id, status="error")
        raise HTTPException(status_code=500, detail="Failed to upload file")

    logger.info("Accepted %s as %s (%d bytes)", job.file_name, job.id, len(content))
    return job.public()


@router.get("/{resume_id}/summary")
def get_resume_summary(resume_id: str, store: ResumeJobStore = Depends(get_store)):
    try:
        resume = store.get(resume_id)
    except Exception:
        logger.exception("Error retrieving summary for %s", resume_id)
        raise HTTPException(status_code=500, detail="Failed to retrieve summary")

    if resume is None:
        raise HTTPException(status_code=404, detail="Resume not found")
    if resume.status == "processing":
        return JSONResponse(
            status_code=202,
            content={"status": "processing", "message": "Resume is still being processed"},
        )
    if resume.status == "error":
        raise HTTPException(status_code=500, detail="Resume processing failed")
    if resume.summary is None:
        raise HTTPException(status_code=404, detail="Summary not available")

    return resume.summary.model_dump(by_alias=True)
