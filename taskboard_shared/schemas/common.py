from enum import Enum
from typing import List
from uuid import UUID

from pydantic import BaseModel


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


# Board column order
TASK_STATUS_ORDER: List["TaskStatus"] = [
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.DONE,
]


class UserRef(BaseModel):
    """Public identity of a user: what other members are allowed to see."""
    id: UUID
    email: str

    model_config = {"from_attributes": True}
