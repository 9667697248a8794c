"""CLI for Our Company Lunch: bootstrap the database and companies."""

from __future__ import annotations

import argparse
import asyncio
import sys


async def cmd_init_db(args):
    """Create all tables."""
    from app.db.engine import create_all

    await create_all()
    print("Tables created.")


async def cmd_create_company(args):
    """Register a company directly, without a member session."""
    from app.db import crud
    from app.db.engine import async_session_factory, create_all

    await create_all()

    domain = args.domain.strip().lower()
    async with async_session_factory() as db:
        if await crud.get_company_by_domain(db, domain):
            print(f"A company with domain {domain} already exists")
            sys.exit(1)
        company = await crud.create_company(
            db, args.name, args.address, args.latitude, args.longitude, domain,
        )

    print(f"Company created: {company.name} (id={company.id}, domain={company.domain})")


async def cmd_clear_verifications(args):
    """Delete expired verification codes once."""
    from app.db.engine import async_session_factory
    from app.services.members import clear_unused_verification_codes

    async with async_session_factory() as db:
        rows = await clear_unused_verification_codes(db)
    print(f"Deleted {rows} expired verification code(s).")


def main():
    parser = argparse.ArgumentParser(description="Our Company Lunch CLI")
    subparsers = parser.add_subparsers(dest="command")

    # init-db
    subparsers.add_parser("init-db", help="Create database tables")

    # create-company
    cc = subparsers.add_parser("create-company", help="Create a new company")
    cc.add_argument("--name", required=True, help="Company name")
    cc.add_argument("--domain", required=True, help="Email domain of the company, e.g. example.com")
    cc.add_argument("--address", default="", help="Street address")
    cc.add_argument("--latitude", type=float, required=True)
    cc.add_argument("--longitude", type=float, required=True)

    # clear-verifications
    subparsers.add_parser("clear-verifications", help="Delete expired verification codes")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "create-company":
        asyncio.run(cmd_create_company(args))
    elif args.command == "clear-verifications":
        asyncio.run(cmd_clear_verifications(args))


if __name__ == "__main__":
    main()
