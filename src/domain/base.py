"""Shared building blocks for domain models"""

import uuid
from datetime import datetime, timezone
from pydantic import BaseModel as PydanticBaseModel, ConfigDict


class BaseModel(PydanticBaseModel):
    """Base class for domain records"""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
