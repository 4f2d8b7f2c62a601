"""Issue feed queries and owner-or-admin guarded mutations."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.core.errors import ForbiddenError, InvalidRequestError, NotFoundError
from app.core.tokens import TokenClaims
from app.models import Issue, User
from app.models.user import ROLE_ADMIN

logger = logging.getLogger(__name__)


def can_modify(claims: TokenClaims, owner_id: int | None) -> bool:
    """Owners may change their own issues; admins may change any."""
    return claims.role == ROLE_ADMIN or (
        owner_id is not None and claims.user_id == owner_id
    )


def _clean_text(issue_text: str | None) -> str:
    text = (issue_text or "").strip()
    if not text:
        raise InvalidRequestError("Issue cannot be empty.")
    return text


def _get_for_update(db: Session, claims: TokenClaims, issue_id: int) -> Issue:
    issue = db.query(Issue).filter(Issue.id == issue_id).first()
    if issue is None:
        raise NotFoundError("Issue not found.")
    if not can_modify(claims, issue.user_id):
        logger.info(
            "Denied change to issue_id=%s by user_id=%s", issue_id, claims.user_id
        )
        raise ForbiddenError("You can only modify your own issues.")
    return issue


def issue_to_dict(
    issue: Issue, user_email: str | None = None, user_name: str | None = None
) -> dict[str, Any]:
    return {
        "id": issue.id,
        "issue_text": issue.issue_text,
        "user_id": issue.user_id,
        "user_email": user_email,
        "user_name": user_name,
        "created_at": issue.created_at,
        "updated_at": issue.updated_at,
    }


def list_issues(db: Session) -> list[dict[str, Any]]:
    """All issues, newest first, annotated with submitter email and name when known."""
    rows = (
        db.query(Issue, User.email, User.full_name)
        .outerjoin(User, Issue.user_id == User.id)
        .order_by(Issue.created_at.desc(), Issue.id.desc())
        .all()
    )
    return [issue_to_dict(issue, email, name) for issue, email, name in rows]


def annotated_issue(db: Session, issue: Issue) -> dict[str, Any]:
    """Single issue in the same shape as list_issues, submitter included."""
    author = None
    if issue.user_id is not None:
        author = (
            db.query(User.email, User.full_name).filter(User.id == issue.user_id).first()
        )
    if author is None:
        return issue_to_dict(issue)
    return issue_to_dict(issue, author.email, author.full_name)


def create_issue(db: Session, claims: TokenClaims, issue_text: str | None) -> Issue:
    issue = Issue(issue_text=_clean_text(issue_text), user_id=claims.user_id)
    db.add(issue)
    db.commit()
    db.refresh(issue)
    logger.info("Created issue_id=%s for user_id=%s", issue.id, claims.user_id)
    return issue


def update_issue(
    db: Session, claims: TokenClaims, issue_id: int, issue_text: str | None
) -> Issue:
    issue = _get_for_update(db, claims, issue_id)
    text = _clean_text(issue_text)
    issue.issue_text = text
    db.commit()
    db.refresh(issue)
    return issue


def delete_issue(db: Session, claims: TokenClaims, issue_id: int) -> None:
    issue = _get_for_update(db, claims, issue_id)
    db.delete(issue)
    db.commit()
    logger.info("Deleted issue_id=%s by user_id=%s", issue_id, claims.user_id)
