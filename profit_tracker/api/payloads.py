"""Base model for request bodies."""

from pydantic import BaseModel, ConfigDict


class RequestPayload(BaseModel):
    """Strips surrounding whitespace before length constraints are checked."""

    model_config = ConfigDict(str_strip_whitespace=True)
