from sqlalchemy import Column, String, DateTime, JSON, Text, Boolean, Float, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from worklink.core.database import Base


class Gig(Base):
    __tablename__ = "gigs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    skills_required = Column(JSON, nullable=False, default=list)
    location = Column(JSON, nullable=False)  # {"city": ..., "state": ...}
    salary = Column(Float, nullable=False, index=True)
    duration = Column(String(100), nullable=False)
    startup_id = Column(UUID(as_uuid=True), ForeignKey("startups.id"), nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    startup = relationship("Startup", back_populates="gigs")

    @property
    def owner_id(self):
        return self.startup_id

    def __repr__(self):
        return f"<Gig(id={self.id}, title={self.title}, startup_id={self.startup_id})>"


class Machine(Base):
    __tablename__ = "machines"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    location = Column(JSON, nullable=False)
    available = Column(Boolean, nullable=False, default=True, index=True)
    manufacturer_id = Column(UUID(as_uuid=True), ForeignKey("manufacturers.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    manufacturer = relationship("Manufacturer", back_populates="machines")

    @property
    def owner_id(self):
        return self.manufacturer_id

    def __repr__(self):
        return f"<Machine(id={self.id}, name={self.name}, manufacturer_id={self.manufacturer_id})>"
