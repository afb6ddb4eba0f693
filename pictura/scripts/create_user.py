"""
Create an account (e.g. an extra admin) from the command line. Run from project root:
  python -m pictura.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m pictura.scripts.create_user "Site Admin" admin@example.com your-secure-password admin
"""
import argparse
import sys

from pictura.core.database import session_scope
from pictura.core.errors import AppError
from pictura.models.user import ROLE_ADMIN, ROLES
from pictura.schemas.auth import RegisterRequest
from pictura.services.accounts import ensure_admin, register


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Pictura account.")
    parser.add_argument("name", help="Display name (1-50 chars)")
    parser.add_argument("email", help="Email address (stored lowercase)")
    parser.add_argument("password", help="Password (6 chars to 72 bytes)")
    parser.add_argument("role", nargs="?", default="user", choices=list(ROLES))
    args = parser.parse_args(argv)

    try:
        with session_scope() as db:
            if args.role == ROLE_ADMIN:
                user, created = ensure_admin(db, args.email, args.password, args.name)
                if not created:
                    print(f"User '{user.email}' already exists.", file=sys.stderr)
                    return 1
            else:
                user, _ = register(
                    db,
                    RegisterRequest(name=args.name, email=args.email, password=args.password),
                )
            print(f"Created user '{user.email}' with role '{user.role}'.")
            return 0
    except AppError as e:
        print(e.message, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
