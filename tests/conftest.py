"""Shared pytest fixtures for test modules."""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from batstat.database import models  # noqa: F401
from batstat.database.database import Base, SessionLocal, engine


@pytest.fixture
def db_session() -> Generator[Session]:
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient]:
    from batstat.main import app

    with TestClient(app) as test_client:
        yield test_client
