"""SQLAlchemy models for spendtrack database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    color = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Rule(Base):
    """Categorization rule model.

    category_id is a plain column: the rule service validates it when rules
    are written.
    """

    __tablename__ = "rules"

    id = Column(Integer, primary_key=True)
    category_id = Column(Integer, nullable=False)
    pattern = Column(String, nullable=False)
    match_type = Column(String, nullable=False)
    priority = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    amount = Column(Numeric(12, 2), nullable=False)
    merchant = Column(String, nullable=False)
    category_id = Column(Integer, nullable=True, index=True)
    timestamp = Column(DateTime, nullable=False, index=True)
    raw_source_text = Column(String, nullable=False, default="")
    bank_name = Column(String, nullable=False)
    account_last4 = Column(String, nullable=True)
    transaction_type = Column(String, nullable=False)
    is_manually_edited = Column(Boolean, default=False, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
