"""SQLAlchemy declarative base for all ORM models."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models."""


class PlayerModel(Base):
    """ORM model for a player profile (currency + energy)."""

    __tablename__ = "players"

    player_id: Mapped[str] = mapped_column(String, primary_key=True)
    currency: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_energy: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    # fractional sleep recovery; rounds half-up to current_energy
    precise_energy: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_sleeping: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_sleep_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    slots: Mapped[list["InventorySlotModel"]] = relationship(
        "InventorySlotModel",
        back_populates="player",
        cascade="all, delete-orphan",
        order_by="InventorySlotModel.slot_index",
    )


class InventorySlotModel(Base):
    """ORM model for one occupied inventory slot. Empty slots have no row."""

    __tablename__ = "inventory_slots"
    __table_args__ = (UniqueConstraint("player_id", "slot_index"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    player_id: Mapped[str] = mapped_column(
        String, ForeignKey("players.player_id", ondelete="CASCADE"), nullable=False
    )
    slot_index: Mapped[int] = mapped_column(Integer, nullable=False)
    instance_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    encoded: Mapped[str] = mapped_column(String, nullable=False)  # "key|level"

    player: Mapped["PlayerModel"] = relationship(
        "PlayerModel", back_populates="slots"
    )
