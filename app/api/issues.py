"""Issue feed: public listing, authenticated create, owner-or-admin edit/delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.guard import get_current_claims
from app.core.database import get_db
from app.core.tokens import TokenClaims
from app.schemas.issue import IssueOut, IssueResponse, IssueTextRequest
from app.schemas.auth import MessageResponse
from app.services import issues as issue_store

router = APIRouter()


@router.get("", response_model=list[IssueOut])
def list_issues(db: Annotated[Session, Depends(get_db)]) -> list[IssueOut]:
    """All issues, newest first, with submitter email/name when known. No login required."""
    return [IssueOut(**row) for row in issue_store.list_issues(db)]


@router.post("", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
def create_issue(
    body: IssueTextRequest,
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    db: Annotated[Session, Depends(get_db)],
) -> IssueResponse:
    """Submit an issue attributed to the caller. Text is trimmed; blank text is rejected."""
    issue = issue_store.create_issue(db, claims, body.issue_text)
    return IssueResponse(
        message="Issue submitted successfully!",
        issue=IssueOut(**issue_store.annotated_issue(db, issue)),
    )


@router.put("/{issue_id}", response_model=IssueResponse)
def update_issue(
    issue_id: int,
    body: IssueTextRequest,
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    db: Annotated[Session, Depends(get_db)],
) -> IssueResponse:
    """Edit issue text. Only the issue's owner or an admin may do this."""
    issue = issue_store.update_issue(db, claims, issue_id, body.issue_text)
    return IssueResponse(
        message="Issue updated successfully!",
        issue=IssueOut(**issue_store.annotated_issue(db, issue)),
    )


@router.delete("/{issue_id}", response_model=MessageResponse)
def delete_issue(
    issue_id: int,
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete an issue. Only the issue's owner or an admin may do this."""
    issue_store.delete_issue(db, claims, issue_id)
    return MessageResponse(message="Issue deleted successfully!")
