from __future__ import annotations

from datetime import date, datetime, time
from enum import StrEnum
from typing import Optional

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql.sqltypes import BigInteger, Date, DateTime, Integer, String, Time

# SQLite only autoincrements INTEGER primary keys.
Identifier = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    pass


class UserRole(StrEnum):
    ADMIN = "admin"
    OPERATOR = "operator"


class PerformanceKind(StrEnum):
    VENUE = "venue"
    TRAVELING = "traveling"


class Modality(StrEnum):
    SINGLE = "single"
    DOUBLE_SAME_SESSION = "double_same_session"
    ONE_PER_SESSION = "one_per_session"
    QUADRUPLE = "quadruple"

    @property
    def label(self) -> str:
        return _MODALITY_LABELS[self]

    @property
    def showings(self) -> int:
        """Expected number of showings per visit."""
        return _MODALITY_SHOWINGS[self]

    @classmethod
    def parse(cls, value: str) -> "Modality":
        """Accept an enum value or one of the legacy numeric codes "1".."4"."""
        raw = value.strip()
        if raw in _LEGACY_CODES:
            return _LEGACY_CODES[raw]
        return cls(raw)


_MODALITY_LABELS = {
    Modality.SINGLE: "1 show",
    Modality.DOUBLE_SAME_SESSION: "2 shows in the same session",
    Modality.ONE_PER_SESSION: "1 show in each session",
    Modality.QUADRUPLE: "4 shows",
}
_MODALITY_SHOWINGS = {
    Modality.SINGLE: 1,
    Modality.DOUBLE_SAME_SESSION: 2,
    Modality.ONE_PER_SESSION: 2,
    Modality.QUADRUPLE: 4,
}
_LEGACY_CODES = {
    "1": Modality.SINGLE,
    "2": Modality.DOUBLE_SAME_SESSION,
    "3": Modality.ONE_PER_SESSION,
    "4": Modality.QUADRUPLE,
}


def _enum_column(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        values_callable=lambda members: [e.value for e in members],
        native_enum=False,
    )


class User(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: Mapped[int] = mapped_column(Identifier, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(_enum_column(UserRole), nullable=False, default=UserRole.OPERATOR)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)


class Venue(Base):
    __tablename__ = "venues"
    __table_args__ = (CheckConstraint("capacity >= 1", name="chk_venues_capacity"),)

    id: Mapped[int] = mapped_column(Identifier, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)


class Performance(Base):
    """Both performance kinds share one table so a month is a single range scan."""

    __tablename__ = "performances"
    __table_args__ = (
        CheckConstraint("capacity IS NULL OR capacity >= 1", name="chk_performances_capacity"),
        Index("idx_performances_date", "performance_date"),
    )

    id: Mapped[int] = mapped_column(Identifier, primary_key=True, autoincrement=True)
    kind: Mapped[PerformanceKind] = mapped_column(_enum_column(PerformanceKind), nullable=False)
    performance_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    # Plain column, not a foreign key: venues may be deleted while performances keep the reference.
    venue_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    venue_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    modality: Mapped[Optional[Modality]] = mapped_column(_enum_column(Modality), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    reservations: Mapped[list["Reservation"]] = relationship(back_populates="performance")


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("student_count IS NULL OR student_count >= 1", name="chk_res_students"),
        CheckConstraint("companion_count IS NULL OR companion_count >= 0", name="chk_res_companions"),
        Index("idx_res_performance", "performance_id"),
    )

    id: Mapped[int] = mapped_column(Identifier, primary_key=True, autoincrement=True)
    performance_id: Mapped[int] = mapped_column(ForeignKey("performances.id"), nullable=False)
    kind: Mapped[PerformanceKind] = mapped_column(_enum_column(PerformanceKind), nullable=False)
    school_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    student_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    companion_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    modality: Mapped[Optional[Modality]] = mapped_column(_enum_column(Modality), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    performance: Mapped["Performance"] = relationship(back_populates="reservations")
