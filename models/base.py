from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(BaseModel):
    """Shared config: snake_case in Python, camelCase in stored blobs."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimestampMixin(BaseModel):
    created_at: datetime = Field(default_factory=utcnow)
