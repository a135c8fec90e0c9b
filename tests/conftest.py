import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from groupledger.database import Base
from groupledger import models
from groupledger.schemas import ExpenseRecord, ShareRecord

START = datetime(2026, 1, 15, 9, 30)

@pytest.fixture
def engine():
    engine = create_engine("sqlite://", future=True, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()

@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    db = TestingSessionLocal()
    yield db
    db.close()

def record(id, payer, amount, shares, days=0, description="", category=None):
    return ExpenseRecord(
        id=id, amount=amount, payer_id=payer, group_id=1,
        created_at=START + timedelta(days=days),
        description=description, category=category,
        shares=[ShareRecord(member_id=uid, amount=amt) for uid, amt in shares.items()],
    )

def bootstrap(db):
    u1 = models.User(name="User1", email="u1@example.com")
    u2 = models.User(name="User2", email="u2@example.com")
    u3 = models.User(name="User3", email="u3@example.com")
    db.add_all([u1, u2, u3])
    db.flush()
    g = models.Group(name="Flat 4B", description="rent and utilities")
    db.add(g); db.flush()
    for u in (u1, u2, u3):
        db.add(models.GroupMember(group_id=g.id, user_id=u.id))
    db.commit()
    return g, u1, u2, u3
