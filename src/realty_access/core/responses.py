"""Success envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """``{"success": true, "message": ..., "data": ...}``"""

    success: bool = True
    message: str
    data: DataT | None = None


class CamelModel(BaseModel):
    """Base for API payloads: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
