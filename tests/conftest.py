"""
Pytest configuration and shared fixtures.

Settings are read at import time, so the environment is prepared before
any application module is imported.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from datetime import datetime
from io import BytesIO
from typing import List, Optional

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient
from PIL import Image as PILImage
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.database import get_db
from app.core.security import create_access_token
from app.core.storage import LocalObjectStore, get_object_store
from app.models import Group, Image, User, UserRole
from app.models.timestamps import utc_now
from main import app


def make_png(size_bytes: int = 0) -> bytes:
    """A real PNG; with size_bytes, an uncompressed one of roughly that size."""
    side = max(int((size_bytes / 3) ** 0.5), 8)
    img = PILImage.new("RGB", (side, side), color=(200, 80, 120))
    buffer = BytesIO()
    img.save(buffer, "PNG", compress_level=0)
    return buffer.getvalue()


def make_upload(filename: str = "pic.png", content: Optional[bytes] = None) -> UploadFile:
    return UploadFile(filename=filename, file=BytesIO(content if content is not None else make_png()))


@pytest.fixture
def png():
    return make_png


@pytest.fixture
def upload():
    return make_upload


@pytest.fixture
def engine():
    """In-memory database shared by every session in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(tmp_path):
    return LocalObjectStore(str(tmp_path / "storage"), "http://testserver")


@pytest.fixture
def owner(db):
    user = User(id="user-1", name="alice", image="http://img.example/alice.png")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_user(db):
    user = User(id="user-2", name="bob")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db):
    user = User(id="admin-1", name="root", role=UserRole.ADMIN)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_group(db):
    """Insert a group with images directly, bypassing upload."""

    def _make_group(
        owner: User,
        name: str = "group",
        tags: Optional[List[str]] = None,
        approved: bool = False,
        image_count: int = 2,
        last_reviewed_at: Optional[datetime] = None,
    ) -> int:
        now = utc_now()
        group = Group(
            name=name,
            tags=tags or [],
            owner_id=owner.id,
            approved_at=now if approved else None,
            last_reviewed_at=last_reviewed_at or (now if approved else None),
        )
        db.add(group)
        db.flush()
        for index in range(image_count):
            key = f"{name}-{group.id}-{index}.png"
            db.add(Image(id=key, url=f"http://testserver/files/{key}", group_id=group.id))
        db.commit()
        return group.id

    return _make_group


@pytest.fixture
def headers_for():
    """Bearer headers for a user, as the auth provider would issue them."""

    def _headers_for(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers_for


@pytest.fixture
def api_app(engine, store):
    """The application wired to the test database and object store."""

    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_store] = lambda: store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_app):
    return TestClient(api_app)
