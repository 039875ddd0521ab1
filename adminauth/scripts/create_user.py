"""
Create a user (e.g. first admin) in the SQL credential store. Run from project root:
  python -m adminauth.scripts.create_user LOGIN PASSWORD [--group NAME ...]
Example:
  python -m adminauth.scripts.create_user admin your-secure-password --group admins
"""
import argparse
import logging
import sys

from adminauth.core.config import LOG_DATE_FORMAT, LOG_FORMAT, get_settings
from adminauth.core.database import build_engine, build_session_factory
from adminauth.core.security import BcryptPasswordHasher
from adminauth.models import Base
from adminauth.storage.errors import LoginTaken
from adminauth.storage.sql import SqlCredentialStore

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    datefmt=LOG_DATE_FORMAT,
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an admin auth user (no registration UI).")
    parser.add_argument("login", help="Login (1-320 chars, case-sensitive)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument(
        "--group",
        action="append",
        default=[],
        dest="groups",
        help="Group membership (repeatable)",
    )
    args = parser.parse_args(argv)

    login = args.login.strip()
    if not login or len(login) > 320:
        print("Invalid login length.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > 128:
        print("Password must be 1-128 characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    engine = build_engine(settings.DATABASE_URL)
    Base.metadata.create_all(engine)
    store = SqlCredentialStore(build_session_factory(engine))
    hasher = BcryptPasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    try:
        user = store.create_user(login, hasher.hash(args.password), groups=args.groups)
    except LoginTaken:
        print(f"User '{login}' already exists.", file=sys.stderr)
        return 1
    finally:
        engine.dispose()
    logger.info("Created user: user_id=%s", user.id)
    print(f"Created user '{login}' with groups {sorted(user.groups)}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
