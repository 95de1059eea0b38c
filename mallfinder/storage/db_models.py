"""SQLAlchemy database models.

Maps domain models to PostgreSQL tables.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, relationship

from mallfinder.models.user import UserRole


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class UserTable(Base):
    """User entity table."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    telegram_user_id = Column(BigInteger, nullable=False, unique=True)
    telegram_username = Column(String(100), nullable=True)
    full_name = Column(String(200), nullable=True)
    role = Column(Enum(UserRole, native_enum=True), nullable=False, default=UserRole.USER)
    last_location_lat = Column(Numeric(9, 6), nullable=True)
    last_location_lon = Column(Numeric(9, 6), nullable=True)
    last_location_updated = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    preferences = relationship(
        "UserPreferencesTable", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_users_telegram_user_id", telegram_user_id),
        Index("ix_users_role", role),
    )


class UserPreferencesTable(Base):
    """Per-user notification preferences."""

    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    notifications_enabled = Column(Boolean, nullable=False, default=False)
    notification_radius = Column(Integer, nullable=False, default=4)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserTable", back_populates="preferences")

    __table_args__ = (
        CheckConstraint(
            "notification_radius BETWEEN 1 AND 50", name="check_notification_radius_range"
        ),
        Index("ix_user_preferences_enabled", notifications_enabled),
    )


class MallTable(Base):
    """Shopping mall table."""

    __tablename__ = "shopping_malls"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(200), nullable=False, index=True)
    address = Column(String(300), nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)
    latitude = Column(Numeric(9, 6), nullable=False)
    longitude = Column(Numeric(9, 6), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    stores = relationship("StoreTable", back_populates="mall", cascade="all, delete-orphan")

    __table_args__ = (Index("ix_shopping_malls_location", latitude, longitude),)


class CategoryTable(Base):
    """Store category table."""

    __tablename__ = "categories"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(100), nullable=False, unique=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class StoreTable(Base):
    """Store table."""

    __tablename__ = "stores"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    mall_id = Column(PG_UUID(as_uuid=True), ForeignKey("shopping_malls.id", ondelete="CASCADE"), nullable=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    floor = Column(String(50), nullable=True)
    location_in_mall = Column(String(100), nullable=True)
    contact_number = Column(String(30), nullable=True)
    logo_url = Column(String(500), nullable=True)
    hours = Column(String(200), nullable=True)
    array_categories = Column(ARRAY(String), nullable=False, default=list)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    mall = relationship("MallTable", back_populates="stores")
    promotions = relationship("PromotionTable", back_populates="store", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_stores_mall_id", mall_id),
        Index("ix_stores_mall_name", mall_id, name),
    )


class PromotionTable(Base):
    """Promotion table."""

    __tablename__ = "promotions"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid4)
    store_id = Column(PG_UUID(as_uuid=True), ForeignKey("stores.id", ondelete="CASCADE"), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    promotion_type = Column(String(50), nullable=True)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=False)
    image = Column(String(500), nullable=True)
    favorites = Column(Integer, nullable=False, default=0)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    store = relationship("StoreTable", back_populates="promotions")

    __table_args__ = (
        CheckConstraint(
            "start_date IS NULL OR start_date < end_date", name="check_promotion_date_range"
        ),
        Index("ix_promotions_end_date", end_date),
        Index("ix_promotions_store_end", store_id, end_date),
    )
