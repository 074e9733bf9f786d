import secrets
import string
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id() -> str:
    """Millisecond timestamp followed by a short random base-36 suffix."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(5))
    return f"{int(time.time() * 1000)}{suffix}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class JobStatus(str, Enum):
    PENDING = "pending"


class Comment(CamelModel):
    id: str = Field(default_factory=generate_id)
    user_name: str
    text: str
    worker_id: str
    timestamp: datetime = Field(default_factory=utc_now)


class Job(CamelModel):
    id: str = Field(default_factory=generate_id)
    url: str
    status: JobStatus = JobStatus.PENDING


class WorkerRecord(CamelModel):
    id: str
    name: str
    status: str = "online"
    connected_at: datetime = Field(default_factory=utc_now)


# Request bodies. Required fields are optional here so that missing values
# reach the store and come back as a 400, not a 422.
class CommentSubmission(CamelModel):
    user_name: str | None = None
    text: str | None = None
    worker_id: str | None = None


class JobSubmission(CamelModel):
    url: str | None = None


class WorkerRegistration(CamelModel):
    name: str | None = None


class CommentView(CamelModel):
    general: list[Comment] = []
    numbered: list[Comment] = []


# Push channel events
NEW_COMMENT = "new_comment"
NEW_JOB = "new_job"
CLEAR_COMMENTS = "clear_comments"
WORKER_UPDATE = "worker_update"
INITIAL_JOBS = "initial_jobs"
REGISTER_WORKER = "register_worker"


def envelope(event: str, data: Any = None) -> dict[str, Any]:
    """Build the JSON frame sent over the push channel."""
    if isinstance(data, CamelModel):
        data = data.to_wire()
    elif isinstance(data, list):
        data = [item.to_wire() if isinstance(item, CamelModel) else item for item in data]
    return {"event": event, "data": data}
