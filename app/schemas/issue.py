"""Request/response schemas for issue endpoints."""

from datetime import datetime

from pydantic import BaseModel


class IssueTextRequest(BaseModel):
    """Body for creating or editing an issue; text is trimmed server-side."""

    issue_text: str | None = None


class IssueOut(BaseModel):
    id: int
    issue_text: str
    user_id: int | None = None
    user_email: str | None = None
    user_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class IssueResponse(BaseModel):
    message: str
    issue: IssueOut
