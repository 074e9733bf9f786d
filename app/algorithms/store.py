import logging

from app.publishers.broadcast import BroadcastHub
from app.utils.errors import ValidationError
from app.utils.metrics import comments_received, jobs_created
from app.utils.schemas import (
    CLEAR_COMMENTS,
    NEW_COMMENT,
    NEW_JOB,
    Comment,
    Job,
    JobStatus,
    envelope,
)

logger = logging.getLogger(__name__)


class Store:
    """Volatile comment and job collections.

    Every mutation is appended first and then broadcast through the hub.
    Invalid submissions raise before touching either.
    """

    def __init__(self, hub: BroadcastHub, unknown_worker_id: str = "Unknown"):
        self.hub = hub
        self.unknown_worker_id = unknown_worker_id
        self._comments: list[Comment] = []
        self._jobs: list[Job] = []

    def add_comment(self, user_name: str | None, text: str | None, worker_id: str | None = None) -> Comment:
        if not user_name or not text:
            raise ValidationError("Data missing", kind="comment")

        comment = Comment(
            user_name=user_name,
            text=text,
            worker_id=worker_id or self.unknown_worker_id,
        )
        self._comments.append(comment)
        comments_received.inc()
        self.hub.broadcast(envelope(NEW_COMMENT, comment))
        return comment

    def add_job(self, url: str | None) -> Job:
        if not url:
            raise ValidationError("Job url missing", kind="job")

        job = Job(url=url)
        self._jobs.append(job)
        jobs_created.inc()
        self.hub.broadcast(envelope(NEW_JOB, job))
        logger.info("[Dashboard] job created id=%s url=%s", job.id, job.url)
        return job

    def list_comments(self) -> list[Comment]:
        return list(self._comments)

    def list_jobs(self) -> list[Job]:
        return list(self._jobs)

    def list_pending_jobs(self) -> list[Job]:
        return [job for job in self._jobs if job.status == JobStatus.PENDING]

    def clear_comments(self) -> None:
        cleared = len(self._comments)
        self._comments = []
        self.hub.broadcast(envelope(CLEAR_COMMENTS))
        logger.info("[Dashboard] comments cleared count=%d", cleared)
