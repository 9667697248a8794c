"""Shared fixtures: in-memory database, fake S3 client and members."""

from __future__ import annotations

import io

import pytest
import pytest_asyncio
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db import crud
from app.db.engine import enable_sqlite_foreign_keys
from app.models import Base, ROLE_EDITOR, ROLE_VIEWER
from app.services import image_store
from app.services.auth import AuthContext, hash_password

TEST_DOMAIN = "lunch.test"


class FakeS3:
    """Records put/delete calls instead of talking to a bucket."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.fail_puts = False
        self.fail_deletes = False

    def put_object(self, Bucket, Key, Body, ContentType=None):
        if self.fail_puts:
            from botocore.exceptions import ClientError
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")
        self.objects[Key] = Body

    def delete_object(self, Bucket, Key):
        if self.fail_deletes:
            from botocore.exceptions import ClientError
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "DeleteObject")
        self.objects.pop(Key, None)


@pytest.fixture
def fake_s3(monkeypatch):
    s3 = FakeS3()
    monkeypatch.setattr(image_store, "get_s3_client", lambda: s3)
    return s3


@pytest.fixture
def jpeg_bytes():
    img = Image.new("RGB", (1280, 960), color=(200, 120, 40))
    buf = io.BytesIO()
    img.save(buf, format="JPEG")
    return buf.getvalue()


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def company(db):
    return await crud.create_company(db, "Lunch Test Inc.", "1 Test St", 37.5663, 126.9779, TEST_DOMAIN)


@pytest.fixture
def make_member(db):
    """Factory: store a member, optionally attached to a company."""
    async def _make(email, name="Member", role=ROLE_VIEWER, company=None, password="password123"):
        member = await crud.create_member(db, email, hash_password(password), name, role)
        if company is not None:
            member = await crud.update_member(db, member, company_id=company.id)
        return member
    return _make


@pytest_asyncio.fixture
async def editor(make_member, company):
    member = await make_member(f"editor@{TEST_DOMAIN}", "Editor", ROLE_EDITOR, company)
    return AuthContext.from_member(member)


@pytest_asyncio.fixture
async def viewer(make_member, company):
    member = await make_member(f"viewer@{TEST_DOMAIN}", "Viewer", ROLE_VIEWER, company)
    return AuthContext.from_member(member)
