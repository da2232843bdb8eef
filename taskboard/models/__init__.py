# SQLModel definitions, imported here to ensure metadata is populated for Alembic.
from .base import UUIDMixin, CreatedAtMixin, TimestampMixin  # noqa: F401
from .user import User  # noqa: F401
from .project import Project  # noqa: F401
from .membership import Membership  # noqa: F401
from .task import Task  # noqa: F401
