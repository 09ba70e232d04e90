# rental_quotes/schemas/response_schemas.py
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    page: int
    limit: int
    total_pages: int = Field(alias="totalPages")


class ResponseMessage(BaseModel, Generic[T]):
    status: bool = True
    message: str
    data: Optional[T] = None


class ListResponse(BaseModel, Generic[T]):
    status: bool = True
    message: str
    data: List[T] = []
    meta: PaginationMeta


class MessageResponse(BaseModel):
    status: bool = True
    message: str
