from datetime import datetime, timezone
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, Text, UniqueConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from worklink.core.database import Base


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApplicantType(str, enum.Enum):
    WORKER = "worker"
    STARTUP = "startup"


class TargetKind(str, enum.Enum):
    GIG = "gig"
    MACHINE = "machine"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GigApplication(Base):
    __tablename__ = "gig_applications"
    __table_args__ = (
        UniqueConstraint("gig_id", "worker_id", name="uq_gig_applications_gig_worker"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="check_gig_application_status",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    gig_id = Column(UUID(as_uuid=True), ForeignKey("gigs.id"), nullable=False, index=True)
    worker_id = Column(UUID(as_uuid=True), ForeignKey("workers.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=ApplicationStatus.PENDING.value, index=True)
    # Values: pending, approved, rejected (approved/rejected are terminal)

    applied_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    message = Column(Text)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    gig = relationship("Gig")
    worker = relationship("Worker")

    @property
    def target_id(self):
        return self.gig_id

    @property
    def applicant_id(self):
        return self.worker_id

    @property
    def applicant_type(self) -> str:
        return ApplicantType.WORKER.value

    def __repr__(self):
        return f"<GigApplication(gig_id={self.gig_id}, worker_id={self.worker_id}, status={self.status})>"


class MachineApplication(Base):
    __tablename__ = "machine_applications"
    __table_args__ = (
        UniqueConstraint(
            "machine_id", "applicant_id", "applicant_type",
            name="uq_machine_applications_machine_applicant",
        ),
        Index("ix_machine_applications_applicant", "applicant_id", "applicant_type"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="check_machine_application_status",
        ),
        CheckConstraint(
            "applicant_type IN ('worker', 'startup')",
            name="check_machine_application_applicant_type",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    machine_id = Column(UUID(as_uuid=True), ForeignKey("machines.id"), nullable=False, index=True)

    # Points at workers.id or startups.id depending on applicant_type
    applicant_id = Column(UUID(as_uuid=True), nullable=False)
    applicant_type = Column(String(20), nullable=False)

    status = Column(String(20), nullable=False, default=ApplicationStatus.PENDING.value, index=True)
    applied_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    message = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    machine = relationship("Machine")

    @property
    def target_id(self):
        return self.machine_id

    def __repr__(self):
        return (
            f"<MachineApplication(machine_id={self.machine_id}, applicant_id={self.applicant_id}, "
            f"applicant_type={self.applicant_type}, status={self.status})>"
        )
