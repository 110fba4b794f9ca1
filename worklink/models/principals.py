from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship, validates
import uuid
import enum
from worklink.core.database import Base


class PrincipalRole(str, enum.Enum):
    WORKER = "worker"
    STARTUP = "startup"
    MANUFACTURER = "manufacturer"


class Worker(Base):
    __tablename__ = "workers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    skills = Column(JSON, default=list)  # List of skills
    location = Column(JSON, nullable=True)  # {"city": ..., "state": ...}

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @validates("email")
    def normalize_email(self, key, value):
        return value.strip().lower() if value else value

    def __repr__(self):
        return f"<Worker(id={self.id}, email={self.email})>"


class Startup(Base):
    __tablename__ = "startups"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    company_name = Column(String(255), nullable=False)
    company_email = Column(String(255), unique=True, index=True, nullable=False)
    work_sector = Column(String(100), nullable=False, index=True)
    location = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    gigs = relationship("Gig", back_populates="startup")

    def __repr__(self):
        return f"<Startup(id={self.id}, company_name={self.company_name})>"


class Manufacturer(Base):
    __tablename__ = "manufacturers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    company_name = Column(String(255), nullable=False)
    company_email = Column(String(255), unique=True, index=True, nullable=False)
    work_sector = Column(String(100), nullable=False, index=True)
    location = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    machines = relationship("Machine", back_populates="manufacturer")

    def __repr__(self):
        return f"<Manufacturer(id={self.id}, company_name={self.company_name})>"
