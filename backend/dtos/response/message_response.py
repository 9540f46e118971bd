"""
Response envelope shared by every endpoint.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class Message(BaseModel):
    """
    Uniform response envelope.

    Successful calls return ``success=True`` and the payload in ``data``;
    failures are rendered by utils.error_handlers with ``success=False``.
    """

    success: bool = Field(True, description="Whether the request succeeded")
    message: str = Field("OK", description="Human-readable outcome")
    data: Optional[Any] = Field(None, description="Response payload")

    @classmethod
    def ok(cls, data: Any = None, message: str = "OK") -> "Message":
        return cls(success=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str, data: Any = None) -> "Message":
        return cls(success=False, message=message, data=data)
