"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from typer.testing import CliRunner

import murajaah.models  # noqa: F401  registers tables on Base
from murajaah.database import Base
from murajaah.repositories import InMemoryReviewRepository, SqlAlchemyReviewRepository
from murajaah.review_service import ReviewService
from murajaah.study_calendar import StudyCalendar
from tests.utils import T0


@pytest.fixture()
def t0() -> datetime:
    return T0


@pytest.fixture()
def calendar() -> StudyCalendar:
    return StudyCalendar(timezone.utc)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def sql_repository(db_session) -> SqlAlchemyReviewRepository:
    return SqlAlchemyReviewRepository(db_session)


@pytest.fixture()
def memory_repository() -> InMemoryReviewRepository:
    return InMemoryReviewRepository()


@pytest.fixture(params=["memory", "sqlalchemy"])
def repository(request):
    if request.param == "memory":
        return request.getfixturevalue("memory_repository")
    return request.getfixturevalue("sql_repository")


@pytest.fixture()
def service(memory_repository, calendar) -> ReviewService:
    return ReviewService(memory_repository, calendar=calendar, clock=lambda: T0)


@pytest.fixture()
def cli_runner(monkeypatch, session_factory):
    """CliRunner with the CLI pointed at the in-memory database"""
    import cli
    import murajaah.database

    monkeypatch.setattr(murajaah.database, "SessionLocal", session_factory)
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)
    return CliRunner()
