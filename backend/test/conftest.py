import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from linkvalidator.shared.db_manager import Base
import linkvalidator.validation.infrastructure.database.models  # noqa: F401

# Use in-memory SQLite for tests; StaticPool lets worker threads share the one connection
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()
