import random

import pytest

from resume_summary.errors import DuplicateJobError, InvalidTransitionError
from resume_summary.job_store import ResumeJobStore
from resume_summary.models import Resume, ResumeSummary


def _job(job_id="resume-1-aaaaaaaaa"):
    return Resume(id=job_id, fileName="cv.txt", uploadDate="2024-05-01T10:00:00+00:00")


def _summary(job_id="resume-1-aaaaaaaaa"):
    return ResumeSummary(id=job_id, name="Jane Doe", currentRole="Engineer", experienceYears=5,
                         skills=["python"], education=[], summary="...")


def test_create_and_get_returns_snapshot():
    store = ResumeJobStore()
    store.create(_job())
    job = store.get("resume-1-aaaaaaaaa")
    assert job.status == "processing"
    job.text = "mutated"
    assert store.get("resume-1-aaaaaaaaa").text is None


def test_get_unknown_returns_none():
    assert ResumeJobStore().get("nope") is None


def test_create_duplicate_id_fails():
    store = ResumeJobStore()
    store.create(_job())
    with pytest.raises(DuplicateJobError):
        store.create(_job())


def test_create_must_start_processing():
    store = ResumeJobStore()
    with pytest.raises(InvalidTransitionError):
        store.create(_job().model_copy(update={"status": "completed", "summary": _summary()}))
    assert len(store) == 0


def test_update_merges_only_given_fields():
    store = ResumeJobStore()
    store.create(_job())
    store.update("resume-1-aaaaaaaaa", text="hello")
    updated = store.update("resume-1-aaaaaaaaa", status="completed", summary=_summary())
    assert updated.text == "hello"
    assert updated.file_name == "cv.txt"
    assert updated.summary.name == "Jane Doe"


def test_update_unknown_is_noop():
    store = ResumeJobStore()
    assert store.update("missing", status="error") is None
    assert len(store) == 0


def test_completed_requires_summary():
    store = ResumeJobStore()
    store.create(_job())
    with pytest.raises(InvalidTransitionError):
        store.update("resume-1-aaaaaaaaa", status="completed")
    with pytest.raises(InvalidTransitionError):
        store.update("resume-1-aaaaaaaaa", summary=_summary())
    with pytest.raises(InvalidTransitionError):
        store.update("resume-1-aaaaaaaaa", status="error", summary=_summary())
    assert store.get("resume-1-aaaaaaaaa").status == "processing"


@pytest.mark.parametrize("terminal", ["completed", "error"])
def test_terminal_states_are_final(terminal):
    store = ResumeJobStore()
    store.create(_job())
    if terminal == "completed":
        store.update("resume-1-aaaaaaaaa", status="completed", summary=_summary())
    else:
        store.update("resume-1-aaaaaaaaa", status="error")

    for kwargs in ({"status": "processing"}, {"status": "error"},
                   {"status": "completed", "summary": _summary()}):
        with pytest.raises(InvalidTransitionError):
            store.update("resume-1-aaaaaaaaa", **kwargs)
    assert store.get("resume-1-aaaaaaaaa").status == terminal


def test_delete():
    store = ResumeJobStore()
    store.create(_job())
    store.delete("resume-1-aaaaaaaaa")
    store.delete("resume-1-aaaaaaaaa")
    assert "resume-1-aaaaaaaaa" not in store


@pytest.mark.parametrize("seed", range(25))
def test_summary_present_iff_completed_under_random_operations(seed):
    rng = random.Random(seed)
    store = ResumeJobStore()
    ids = [f"resume-{i}-x" for i in range(4)]
    for _ in range(60):
        job_id = rng.choice(ids)
        op = rng.choice(["create", "text", "complete", "fail", "summary_only", "bare_complete", "delete"])
        try:
            if op == "create":
                store.create(_job(job_id))
            elif op == "text":
                store.update(job_id, text="some text")
            elif op == "complete":
                store.update(job_id, status="completed", summary=_summary(job_id))
            elif op == "fail":
                store.update(job_id, status="error")
            elif op == "summary_only":
                store.update(job_id, summary=_summary(job_id))
            elif op == "bare_complete":
                store.update(job_id, status="completed")
            else:
                store.delete(job_id)
        except (DuplicateJobError, InvalidTransitionError):
            pass

        for i in ids:
            job = store.get(i)
            if job is not None:
                assert (job.summary is not None) == (job.status == "completed")
