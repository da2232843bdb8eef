"""
Script to create a user with a password for local testing, optionally
with a first project they own.
"""

import argparse
import asyncio

from taskboard.core.database import get_session_context, init_db
from taskboard.core.errors import AppError
from taskboard.services import projects as project_service
from taskboard.services import users as user_service


async def create_user(email: str, password: str, project_name: str | None = None, create_tables: bool = False):
    if create_tables:
        await init_db()

    async with get_session_context() as session:
        user = await user_service.get_user_by_email(session, email)
        if not user:
            user = await user_service.register_user(session, email, password)
            print(f"Created user: {email}")
        else:
            print(f"User {email} already exists.")

        if project_name:
            project = await project_service.create_project(session, project_name, user.id)
            print(f"Created project '{project.name}' ({project.id}) owned by {email}.")

    print("Done.")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a local taskboard user.")
    parser.add_argument("--email", required=True, help="Email address for the user")
    parser.add_argument("--password", required=True, help="Password for the user")
    parser.add_argument("--project", help="Also create a project owned by the user")
    parser.add_argument("--create-tables", action="store_true", help="Create tables first (development only)")

    args = parser.parse_args(argv)

    try:
        asyncio.run(create_user(args.email, args.password, args.project, args.create_tables))
    except AppError as exc:
        print(f"Error: {exc.detail}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
