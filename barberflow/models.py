from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

USER_ROLES = ("ADMIN", "BARBER", "EMPLOYEE", "CUSTOMER")
PLANS = ("free", "pro", "business")
APPOINTMENT_STATUSES = ("pending", "confirmed", "cancelled", "completed")
CLIENT_STATUSES = ("active", "inactive")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)  # Stored lower-cased
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="BARBER", nullable=False)  # ADMIN, BARBER, EMPLOYEE, CUSTOMER
    barber_shop = Column(String(255), nullable=True)
    status = Column(String(20), default="active", nullable=False)  # active, inactive

    # Stripe billing state, written by checkout and the webhook handler
    stripe_customer_id = Column(String(255), unique=True, index=True, nullable=True)
    subscription_status = Column(String(50), default="none", nullable=False)
    plan = Column(String(20), default="free", nullable=False)  # free, pro, business

    # SHA-256 hex digest of the emailed reset token, never the raw token
    password_reset_token = Column(String(64), index=True, nullable=True)
    password_reset_expires = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    services = relationship("Service", back_populates="barber", cascade="all, delete-orphan")
    clients = relationship("Client", back_populates="shop", cascade="all, delete-orphan")
    appointments = relationship(
        "Appointment", back_populates="barber", cascade="all, delete-orphan"
    )


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    barber_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # Minutes
    price = Column(Float, nullable=False)
    category = Column(String(100), default="General", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    barber = relationship("User", back_populates="services")
    appointments = relationship("Appointment", back_populates="service")


class Client(Base):
    __tablename__ = "clients"
    __table_args__ = (UniqueConstraint("shop_id", "email", name="uq_clients_shop_email"),)

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(20), default="active", nullable=False)  # active, inactive

    # Aggregates maintained by the appointment service
    total_bookings = Column(Integer, default=0, nullable=False)
    total_spent = Column(Float, default=0.0, nullable=False)
    last_visit = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    shop = relationship("User", back_populates="clients")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_barber_window", "barber_id", "start_time", "end_time"),
    )

    id = Column(Integer, primary_key=True, index=True)
    barber_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id", ondelete="SET NULL"), nullable=True)
    client_name = Column(String(255), nullable=False)
    client_email = Column(String(255), nullable=False)
    start_time = Column(DateTime, nullable=False)  # Naive UTC
    end_time = Column(DateTime, nullable=False)  # start_time + service duration
    status = Column(String(20), default="confirmed", nullable=False)
    price = Column(Float, nullable=False)  # Copied from the service at booking time
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    barber = relationship("User", back_populates="appointments")
    service = relationship("Service", back_populates="appointments")
