"""Seed the database with a demo company, an editor and a few diners."""

import asyncio

from app.db import crud
from app.db.engine import async_session_factory, create_all
from app.models import ROLE_EDITOR
from app.services.auth import hash_password

DEMO_DOMAIN = "lunch.example.com"

DEMO_DINERS = [
    ("Noodle Bar", "https://maps.example.com/noodle-bar", 37.5668, 126.9786, ["noodles", "quick"]),
    ("Green Bowl", "https://maps.example.com/green-bowl", 37.5651, 126.9770, ["salad"]),
    ("Corner Kimbap", "https://maps.example.com/corner-kimbap", 37.5682, 126.9801, ["kimbap", "cheap"]),
]


async def seed():
    await create_all()

    async with async_session_factory() as db:
        if await crud.get_company_by_domain(db, DEMO_DOMAIN):
            print("Demo company already exists, skipping seed.")
            return

        company = await crud.create_company(
            db, "Demo Lunch Inc.", "1 City Hall Plaza", 37.5663, 126.9779, DEMO_DOMAIN,
        )
        print(f"Created company: {company.name} (id: {company.id})")

        member = await crud.create_member(
            db, f"editor@{DEMO_DOMAIN}", hash_password("lunchtime"), "Demo Editor", ROLE_EDITOR,
        )
        await crud.update_member(db, member, company_id=company.id)
        print(f"Created editor: {member.email} / lunchtime")

        for name, link, lat, lon, tags in DEMO_DINERS:
            diner = await crud.create_diner(db, company.id, name, link, lat, lon, tags)
            print(f"Created diner: {diner.name} (id: {diner.id})")

    print("\nSeed complete. Start the server with: uvicorn app.main:app --reload")


if __name__ == "__main__":
    asyncio.run(seed())
