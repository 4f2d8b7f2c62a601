"""
Provision a user out of band (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD [role] [--full-name NAME]
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.errors import AppError
from app.core.logging import setup_logging
from app.core.tokens import get_token_service
from app.models.user import ROLE_ADMIN, ROLE_USER
from app.services.auth import AuthService
from app.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an Issue Logger user.")
    parser.add_argument("email", help="Email address (login name)")
    parser.add_argument("password", help="Password (at least 6 chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=[ROLE_USER, ROLE_ADMIN])
    parser.add_argument("--full-name", default=None, help="Display name")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    db = SessionLocal()
    try:
        service = AuthService(
            CredentialStore(db),
            get_token_service(),
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        )
        user = service.register(
            email=args.email.strip(),
            password=args.password,
            full_name=args.full_name,
            requested_role=args.role,
        )
        print(f"Created user '{user.email}' (id={user.id}) with role '{user.role}'.")
    except AppError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
