"""Best-effort profile, preference and address rows attached to a user.

These rows are auxiliary. Registration succeeds on the user row alone; each
side write below runs in its own savepoint and a failure only skips that row.
Missing rows are reconciled later (e.g. the user fills in their profile); they
are never retried here.
"""

import logging
from datetime import date
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import UserAddress, UserPreferences, UserProfile
from app.models.user_records import ADDRESS_TYPES

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("phone", "date_of_birth", "bio", "avatar_url")
PREFERENCE_FIELDS = ("theme", "language", "notifications_enabled", "email_notifications")
ADDRESS_FIELDS = ("street", "city", "state", "postal_code", "country")


def _parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _build_profile(user_id: int, details: dict[str, Any]) -> UserProfile:
    return UserProfile(
        user_id=user_id,
        phone=details.get("phone") or None,
        date_of_birth=_parse_date(details.get("date_of_birth")),
        bio=details.get("bio") or None,
        avatar_url=details.get("avatar_url") or None,
    )


def _build_preferences(user_id: int, details: dict[str, Any]) -> UserPreferences:
    prefs = UserPreferences(user_id=user_id)
    for field in PREFERENCE_FIELDS:
        value = details.get(field)
        if value is not None:
            setattr(prefs, field, value)
    return prefs


def _build_address(user_id: int, details: dict[str, Any]) -> UserAddress | None:
    if not any(details.get(f) for f in ADDRESS_FIELDS):
        return None
    address_type = details.get("address_type") or "home"
    if address_type not in ADDRESS_TYPES:
        raise ValueError(f"address_type must be one of {', '.join(ADDRESS_TYPES)}")
    return UserAddress(
        user_id=user_id,
        address_type=address_type,
        is_primary=True,
        **{f: details.get(f) or None for f in ADDRESS_FIELDS},
    )


def seed_user_records(db: Session, user_id: int, details: dict[str, Any]) -> list[str]:
    """
    Insert profile, preferences and (if any address field is set) address rows.

    Returns the names of the rows written. Failures are logged and skipped; the
    user row, already committed by the caller, is never touched.
    """
    builders = (
        ("profile", _build_profile),
        ("preferences", _build_preferences),
        ("address", _build_address),
    )
    written: list[str] = []
    for name, build in builders:
        try:
            row = build(user_id, details)
            if row is None:
                continue
            with db.begin_nested():
                db.add(row)
            db.commit()
            written.append(name)
        except (SQLAlchemyError, ValueError, TypeError) as e:
            db.rollback()
            logger.warning(
                "Skipped %s row for user_id=%s: %s", name, user_id, type(e).__name__
            )
    return written


def _row_to_dict(row: Any, fields: tuple[str, ...]) -> dict[str, Any]:
    return {f: getattr(row, f) for f in fields}


def load_user_records(db: Session, user_id: int) -> dict[str, dict[str, Any] | None]:
    """Return profile, preferences and primary address for a user; each may be None."""
    profile = db.query(UserProfile).filter(UserProfile.user_id == user_id).first()
    preferences = (
        db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()
    )
    address = (
        db.query(UserAddress)
        .filter(UserAddress.user_id == user_id)
        .order_by(UserAddress.is_primary.desc(), UserAddress.id)
        .first()
    )
    return {
        "profile": _row_to_dict(profile, PROFILE_FIELDS) if profile else None,
        "preferences": _row_to_dict(preferences, PREFERENCE_FIELDS) if preferences else None,
        "address": (
            _row_to_dict(address, ("address_type", *ADDRESS_FIELDS, "is_primary"))
            if address
            else None
        ),
    }
