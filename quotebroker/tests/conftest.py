import os

# settings are read once and cached: point them at test values before any import
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["RESEND_API_KEY"] = "re_test_key"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# FORCE model registration
import quotebroker.models  # noqa

from quotebroker.core.errors import NotificationError
from quotebroker.core.security import create_access_token
from quotebroker.db.base import Base
from quotebroker.db.session import get_db
from quotebroker.main import app
from quotebroker.models.profile import Profile
from quotebroker.models.project import Project
from quotebroker.models.quote import Quote
from quotebroker.services.notification_service import get_notifier
from quotebroker.services.storage_service import LocalQuoteStorage, get_storage

API = "/api/v1"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


class FakeNotifier:
    """Records every message instead of calling the email provider."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send(self, *, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise NotificationError("provider unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html})


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def storage(tmp_path):
    return LocalQuoteStorage(tmp_path / "quotes")


@pytest.fixture
def client(notifier, storage):
    def _get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_storage] = lambda: storage

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c

    app.dependency_overrides.clear()


# ---------------------------
# data helpers
# ---------------------------


def make_user(db, email: str, is_admin: bool = False) -> Profile:
    p = Profile(id=uuid.uuid4(), email=email, is_admin=is_admin)
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


def token_for(profile: Profile) -> str:
    return create_access_token(subject=str(profile.id), claims={"email": profile.email})


def auth(profile: Profile) -> dict:
    return {"Authorization": f"Bearer {token_for(profile)}"}


def make_project(db, owner: Profile, title: str = "Villa Solbacken") -> Project:
    p = Project(id=uuid.uuid4(), title=title, created_by=owner.id)
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


def make_quote(
    db,
    project: Project,
    uploader: Profile,
    contractor_type: str = "Elektriker",
    storage: LocalQuoteStorage = None,
    content: bytes = b"%PDF-1.4 quote",
) -> Quote:
    file_path = f"{project.id}/1700000000000_offert.pdf"
    if storage is not None:
        storage.save(file_path, content)

    q = Quote(
        id=uuid.uuid4(),
        project_id=project.id,
        user_id=uploader.id,
        contractor_type=contractor_type,
        amount=Decimal("125000.00"),
        file_path=file_path,
        file_name="offert.pdf",
    )
    db.add(q)
    db.commit()
    db.refresh(q)
    return q


@pytest.fixture
def people(db):
    """
    owner: created the project
    uploader: contractor who uploaded the quote
    requester, outsider: other contractors
    admin: administrator
    """
    return {
        "owner": make_user(db, "owner@example.com"),
        "uploader": make_user(db, "uploader@example.com"),
        "requester": make_user(db, "requester@example.com"),
        "outsider": make_user(db, "outsider@example.com"),
        "admin": make_user(db, "admin@example.com", is_admin=True),
    }


@pytest.fixture
def project(db, people):
    return make_project(db, people["owner"])


@pytest.fixture
def quote(db, project, people, storage):
    return make_quote(db, project, people["uploader"], storage=storage)
