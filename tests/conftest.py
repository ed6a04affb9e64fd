from decimal import Decimal
from typing import Any, Callable, Dict, Generator, List, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Query, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from stratwealth.main import app
from stratwealth.core.database import Base, get_db
from stratwealth.core.security import get_password_hash
from stratwealth.core.utils import utcnow
from stratwealth.auth.models import Role, User
from stratwealth.auth.service import issue_token
from stratwealth.kyc.models import DocumentType, KycStatus, KycSubmission
from stratwealth.wallet.models import Wallet

# Setup In-Memory Database for Testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "password123"


def override_get_db() -> Generator[Any, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def test_db() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def make_user(db: Session) -> Callable[..., Tuple[User, Dict[str, str]]]:
    """
    Creates a user with a wallet directly in the database.
    Returns the user and request headers carrying a valid session token.
    """
    counter = {"n": 0}

    def _make_user(
        role: Role = Role.USER,
        balance: Decimal = Decimal("0.00"),
        verified: bool = False,
        kyc: KycStatus = KycStatus.NOT_SUBMITTED,
        banned: bool = False,
    ) -> Tuple[User, Dict[str, str]]:
        counter["n"] += 1
        user = User(
            first_name="Test",
            last_name=f"User{counter['n']}",
            email=f"user{counter['n']}@stratwealth.com",
            hashed_password=get_password_hash(PASSWORD),
            role=role,
            email_verified_at=utcnow() if verified else None,
            is_banned=banned,
        )
        db.add(user)
        db.flush()
        db.add(Wallet(user_id=user.id, balance=balance))
        if kyc != KycStatus.NOT_SUBMITTED:
            db.add(KycSubmission(
                user_id=user.id,
                status=kyc,
                country="United States",
                document_type=DocumentType.PASSPORT,
                document_number="X1234567",
                document_image="kyc/test-passport.png",
                submitted_at=utcnow(),
            ))
        db.commit()
        db.refresh(user)
        return user, auth_headers(user)

    return _make_user


@pytest.fixture
def investor(make_user) -> Tuple[User, Dict[str, str]]:
    """Verified, KYC-approved user with 5,000,000 in the wallet."""
    return make_user(balance=Decimal("5000000.00"), verified=True, kyc=KycStatus.APPROVED)


@pytest.fixture
def admin(make_user) -> Tuple[User, Dict[str, str]]:
    return make_user(role=Role.ADMIN, verified=True)


@pytest.fixture
def locked_entities(monkeypatch) -> List[type]:
    """
    Records the mapped class of every query that takes a row lock.
    SQLite ignores FOR UPDATE, so the call itself is what gets checked.
    """
    locked: List[type] = []
    with_for_update = Query.with_for_update

    def recording(self, *args, **kwargs):
        locked.append(self.column_descriptions[0]["entity"])
        return with_for_update(self, *args, **kwargs)

    monkeypatch.setattr(Query, "with_for_update", recording)
    return locked
