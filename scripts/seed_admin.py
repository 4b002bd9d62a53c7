"""Grant platform admin rights to an identity-provider user.

Usage:
    python -m scripts.seed_admin <user_id> <email> [SUPER_ADMIN|ADMIN|SUPPORT]
All imports use tenantops.*.
"""

import asyncio
import sys

from sqlalchemy.exc import IntegrityError

from tenantops.domain.enums import AdminRole
from tenantops.infrastructure.persistence.database import dispose_engine, get_session_factory
from tenantops.infrastructure.persistence.repositories import AdminUserRepository


async def main() -> None:
    """Insert an admin_user row for user_id."""
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.seed_admin <user_id> <email> [SUPER_ADMIN|ADMIN|SUPPORT]",
            file=sys.stderr,
        )
        sys.exit(1)
    user_id = sys.argv[1]
    email = sys.argv[2]
    try:
        role = AdminRole(sys.argv[3].upper()) if len(sys.argv) > 3 else AdminRole.ADMIN
    except ValueError:
        print(f"Unknown role: {sys.argv[3]}", file=sys.stderr)
        sys.exit(1)

    factory = get_session_factory()
    try:
        async with factory() as session:
            async with session.begin():
                admin = await AdminUserRepository(session).create_admin(user_id, email, role)
    except IntegrityError:
        print(f"Admin already exists for user {user_id}", file=sys.stderr)
        sys.exit(1)
    finally:
        await dispose_engine()
    print(f"Admin {admin.user_id} ({admin.email}) granted role {admin.role.value}")


if __name__ == "__main__":
    asyncio.run(main())
