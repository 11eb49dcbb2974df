import datetime as dt
from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.certificates.dtos import TemplateType
from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Civil date only, time of day is never used for scheduling
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    created_by: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.uuid", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    participants: Mapped[list["Participant"]] = relationship(
        "Participant", back_populates="event", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Event {self.name} on {self.date}>"


class Participant(Base, TimeStamp):
    __tablename__ = TableNames.PARTICIPANTS.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    # Authoritative "this participant is done" flag
    certificate_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    certificate_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    event: Mapped["Event"] = relationship("Event", back_populates="participants")

    def __repr__(self) -> str:
        return f"<Participant {self.name} <{self.email}>>"


class CertificateTemplate(Base, TimeStamp):
    __tablename__ = TableNames.CERTIFICATE_TEMPLATES.value

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    template_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default=TemplateType.SISTEC.value
    )

    generated_certificates: Mapped[list["GenerationRecord"]] = relationship(
        "GenerationRecord",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="GenerationRecord.generated_at",
    )

    def __repr__(self) -> str:
        return f"<CertificateTemplate {self.template_type} for event {self.event_id}>"


class GenerationRecord(Base, TimeStamp):
    __tablename__ = TableNames.GENERATION_RECORDS.value
    __table_args__ = (
        UniqueConstraint("template_id", "participant_id", name="uq_generation_record_participant"),
    )

    template_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.CERTIFICATE_TEMPLATES.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    participant_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.PARTICIPANTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    certificate_path: Mapped[str] = mapped_column(String(500), nullable=False)
    certificate_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    generated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    template: Mapped["CertificateTemplate"] = relationship(
        "CertificateTemplate", back_populates="generated_certificates"
    )

    def __repr__(self) -> str:
        return f"<GenerationRecord participant={self.participant_id} sent_at={self.sent_at}>"
