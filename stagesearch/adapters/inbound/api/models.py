"""Pydantic models for API requests and responses."""

from pydantic import BaseModel, Field


class ReindexRequest(BaseModel):
    """Request model for a reindex run."""

    rebuild: bool = Field(False, description="Delete the index and redefine its mapping first")
    reindex: bool = Field(False, description="Re-index every record of every indexable type")
    remove: str | None = Field(
        None,
        description="Remove documents matching an 'id,type' reference",
        json_schema_extra={"example": "12,Page"},
    )
    confirm: bool = Field(False, description="Actually delete what 'remove' matched")


class ReindexResponse(BaseModel):
    """Response model for a completed reindex run."""

    lines: list[str] = Field(default_factory=list, description="Progress log, one line per action")
    indexed: int = Field(0, ge=0, description="Documents written")
    failures: list[str] = Field(default_factory=list, description="Records that failed to index")
    matched: list[str] = Field(default_factory=list, description="Documents matched by 'remove'")
    removed: int = Field(0, ge=0, description="Documents deleted by 'remove'")
    error: str | None = Field(None, description="Why the bulk reindex stopped early, if it did")
    error_code: str | None = Field(None, description="Error code of the early stop, if any")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    document_store: str = Field(..., description="Document store backend status")
