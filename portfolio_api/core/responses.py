"""Response envelope models.

Every success response is {"success": true, "message"?, "data": ...};
collections add pagination "meta". Errors are
{"success": false, "error": {"code", "message", "details"}}.
"""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, computed_field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata for collections.

    Attributes:
        total: Total number of items across all pages.
        page: Current page number (1-indexed).
        per_page: Number of items per page.
    """

    total: int
    page: int
    per_page: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        """Calculate total number of pages.

        Returns:
            Number of pages needed to display all items.
            Returns 0 if total is 0.
        """
        if self.total == 0 or self.per_page <= 0:
            return 0
        return (self.total + self.per_page - 1) // self.per_page


class DataResponse(BaseModel, Generic[T]):
    """Standard response envelope for single resources.

    Usage:
        @router.get("/skills/{skill_id}")
        async def get_skill(skill_id: UUID, db: DbSession) -> DataResponse[SkillRead]:
            skill = await skill_service.get_skill(db, skill_id)
            return DataResponse(data=SkillRead.model_validate(skill))
    """

    success: Literal[True] = True
    message: str | None = None
    data: T


class ListResponse(BaseModel, Generic[T]):
    """Standard response envelope for collections."""

    success: Literal[True] = True
    message: str | None = None
    data: list[T]
    meta: PaginationMeta


class MessageResponse(BaseModel):
    """Success envelope with no payload (logout, delete)."""

    success: Literal[True] = True
    message: str


class ErrorDetail(BaseModel):
    """Error detail for response body.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        details: Optional list of field-level errors (for validation).
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Standard error response envelope.

    Usage in exception handlers:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=ErrorDetail(code=exc.code, message=exc.message)
            ).model_dump(),
        )
    """

    success: Literal[False] = False
    error: ErrorDetail
