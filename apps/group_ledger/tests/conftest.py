from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from group_ledger.api.app import create_app
from group_ledger.db.base import Base, import_orm_models
from group_ledger.db.models.expense import Expense
from group_ledger.db.models.group import Group, GroupMember
from group_ledger.db.models.payment import Payment, PaymentStatus
from group_ledger.db.models.user import User
from group_ledger.db.session import get_db_session

GROUP_ID = "flat-42"


@pytest.fixture
def sqlite_session_factory() -> Generator[sessionmaker[Session], None, None]:
    import_orm_models()
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(
        bind=engine,
        class_=Session,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    try:
        yield factory
    finally:
        Base.metadata.drop_all(engine)


def seed_group(session: Session) -> dict[str, str]:
    """Three members who spent 150, 100 and 50 in February 2026."""

    session.add_all(
        [
            User(id="ana", name="Ana"),
            User(id="bia", name="Bia"),
            User(id="caio", name="Caio"),
            User(id="zed", name="Zed"),
            Group(id=GROUP_ID, name="Flat 42"),
        ]
    )
    session.flush()
    session.add_all(
        [
            GroupMember(
                group_id=GROUP_ID,
                user_id=user_id,
                joined_at=datetime(2026, 1, day, tzinfo=UTC),
            )
            for day, user_id in enumerate(("ana", "bia", "caio"), start=1)
        ]
    )
    session.add_all(
        [
            Expense(
                id="exp-1",
                group_id=GROUP_ID,
                user_id="ana",
                amount=Decimal("150.00"),
                category="groceries",
                description="Market",
                occurred_at=datetime(2026, 2, 10, 12, tzinfo=UTC),
            ),
            Expense(
                id="exp-2",
                group_id=GROUP_ID,
                user_id="bia",
                amount=Decimal("100.00"),
                category="utilities",
                description="Power bill",
                occurred_at=datetime(2026, 2, 11, 12, tzinfo=UTC),
            ),
            Expense(
                id="exp-3",
                group_id=GROUP_ID,
                user_id="caio",
                amount=Decimal("50.00"),
                category="groceries",
                description="Bakery",
                occurred_at=datetime(2026, 2, 12, 12, tzinfo=UTC),
            ),
        ]
    )
    session.commit()
    return {"group_id": GROUP_ID, "ana": "ana", "bia": "bia", "caio": "caio"}


def add_payment(
    session: Session,
    *,
    payment_id: str,
    from_user_id: str,
    to_user_id: str,
    amount: str,
    status: PaymentStatus = PaymentStatus.COMPLETED,
    created_at: datetime | None = None,
) -> None:
    session.add(
        Payment(
            id=payment_id,
            group_id=GROUP_ID,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            amount=Decimal(amount),
            status=status,
            created_at=created_at or datetime(2026, 2, 15, 12, tzinfo=UTC),
        )
    )
    session.commit()


@pytest.fixture
def seeded_group(sqlite_session_factory: sessionmaker[Session]) -> dict[str, str]:
    with sqlite_session_factory() as session:
        return seed_group(session)


@pytest.fixture
def client(
    sqlite_session_factory: sessionmaker[Session],
) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db_session() -> Generator[Session, None, None]:
        with sqlite_session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def record_payment(
    sqlite_session_factory: sessionmaker[Session],
) -> Callable[..., None]:
    def _record(**kwargs: Any) -> None:
        with sqlite_session_factory() as session:
            add_payment(session, **kwargs)

    return _record
