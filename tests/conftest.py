"""
Shared fixtures: an in-memory SQLite store, a row factory, and an API client
that authenticates with real HS256 tokens.
"""

import os

# Settings are read at import time – give them something before any app import.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")

import json
import uuid

import jwt
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings
from core.security import Caller
from core.timeutil import utcnow
from database import Base
from models.attachment import Attachment
from models.cipher import Cipher, CipherType
from models.collection import Collection, CollectionAssignment, CollectionCipher
from models.event import Event  # noqa: F401 – registers the table
from models.folder import Folder, FolderCipher
from models.organization import Membership, MembershipRole, Organization
from models.user import User


@pytest.fixture
def engine():
    """Fresh in-memory database per test, with working SAVEPOINTs."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy
    # emit BEGIN itself.
    @event.listens_for(eng, "connect")
    def _no_implicit_tx(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(eng, "begin")
    def _explicit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


class Factory:
    """Inserts rows and commits, so every test starts from durable state."""

    def __init__(self, db):
        self.db = db

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        return obj

    def user(self, email=None):
        user_uuid = str(uuid.uuid4())
        return self._save(User(uuid=user_uuid, email=email or f"{user_uuid}@example.com"))

    def org(self, name="Acme"):
        return self._save(Organization(uuid=str(uuid.uuid4()), name=name))

    def member(self, user, org, role=MembershipRole.MEMBER, access_all=False):
        return self._save(Membership(
            uuid=str(uuid.uuid4()),
            user_uuid=user.uuid,
            org_uuid=org.uuid,
            atype=int(role),
            access_all=access_all,
        ))

    def collection(self, org, name="Shared"):
        return self._save(Collection(uuid=str(uuid.uuid4()), org_uuid=org.uuid, name=name))

    def assign(self, user, collection):
        return self._save(CollectionAssignment(user_uuid=user.uuid, collection_uuid=collection.uuid))

    def link(self, cipher, collection):
        return self._save(CollectionCipher(cipher_uuid=cipher.uuid, collection_uuid=collection.uuid))

    def folder(self, user, name="Work"):
        return self._save(Folder(uuid=str(uuid.uuid4()), user_uuid=user.uuid, name=name))

    def file(self, folder, cipher):
        return self._save(FolderCipher(folder_uuid=folder.uuid, cipher_uuid=cipher.uuid))

    def attachment(self, cipher, size=2048):
        return self._save(Attachment(
            id=str(uuid.uuid4()),
            cipher_uuid=cipher.uuid,
            file_name="2.enc-file-name",
            file_size=size,
            akey="2.enc-key",
        ))

    def cipher(self, user=None, org=None, cipher_type=CipherType.LOGIN, data=None):
        now = utcnow()
        return self._save(Cipher(
            uuid=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            user_uuid=user.uuid if user else None,
            organization_uuid=org.uuid if org else None,
            atype=int(cipher_type),
            name="2.enc-name",
            data=json.dumps(data if data is not None else {"Username": "2.enc-user"}),
            favorite=False,
        ))


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def caller_for():
    def _make(user, device_type=9, ip="203.0.113.7"):
        return Caller(user_uuid=user.uuid, device_type=device_type, ip_address=ip)
    return _make


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from database import get_db
    from main import app

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _make(user, device_type=9):
        token = jwt.encode(
            {"sub": user.uuid, "devicetype": device_type},
            settings.secret_key,
            algorithm="HS256",
        )
        return {"Authorization": f"Bearer {token}"}
    return _make
