"""
Spa & Wellness Models: catalog, appointments and derived billing
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .database import Base
from .models import utcnow


class SpaService(Base):
    __tablename__ = "spa_services"

    id = Column(Integer, primary_key=True, index=True)
    service_name = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False)  # massage, facial, body-treatment, therapy, wellness, other
    description = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)  # Minutes, 15-480
    base_price = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    max_capacity = Column(Integer, default=1, nullable=False)
    benefits = Column(JSON, default=list)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Therapist(Base):
    __tablename__ = "therapists"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(50), nullable=False)
    specializations = Column(JSON, default=list)
    certifications = Column(JSON, default=list)  # [{name, issueDate, expiryDate, certificateNumber}]
    experience = Column(Integer, default=0, nullable=False)  # Years
    hourly_rate = Column(Float, nullable=False)
    bio = Column(Text, nullable=True)
    availability = Column(JSON, nullable=True)  # {"Monday": {start, end, available}, ...}
    is_active = Column(Boolean, default=True, nullable=False)
    total_appointments = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class SpaRoom(Base):
    __tablename__ = "spa_rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(20), unique=True, nullable=False, index=True)
    room_type = Column(String(20), nullable=False)  # single, double, suite, vip
    capacity = Column(Integer, nullable=False)
    amenities = Column(JSON, default=list)
    features = Column(JSON, default=list)
    status = Column(String(20), default="available", nullable=False)  # available, occupied, maintenance, reserved
    hourly_rate = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class SpaPackage(Base):
    __tablename__ = "spa_packages"

    id = Column(Integer, primary_key=True, index=True)
    package_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    package_type = Column(String(30), nullable=False)  # single-service, bundle, membership, package-deal
    total_duration = Column(Integer, nullable=True)
    original_price = Column(Float, nullable=False)
    discount_type = Column(String(20), default="percentage", nullable=False)  # price, percentage
    discount_value = Column(Float, default=0, nullable=False)
    final_price = Column(Float, nullable=True)
    valid_from = Column(DateTime, nullable=True)
    valid_until = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    services = relationship(
        "SpaPackageService",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="SpaPackageService.id",
    )


class SpaPackageService(Base):
    """One service line inside a package"""

    __tablename__ = "spa_package_services"

    id = Column(Integer, primary_key=True, index=True)
    package_id = Column(Integer, ForeignKey("spa_packages.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("spa_services.id"), nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    discount = Column(Float, default=0, nullable=False)  # Percentage 0-100

    package = relationship("SpaPackage", back_populates="services")
    service = relationship("SpaService")


class SpaAppointment(Base):
    __tablename__ = "spa_appointments"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(String(50), unique=True, nullable=False, index=True)  # APT-<ms>-<rand>

    # Guest snapshot
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, index=True)
    guest_name = Column(String(255), nullable=False)
    guest_phone = Column(String(50), nullable=True)
    guest_email = Column(String(255), nullable=True)
    room_number = Column(String(20), nullable=True)

    # Booked components with name snapshots
    service_id = Column(Integer, ForeignKey("spa_services.id"), nullable=False)
    service_name = Column(String(255), nullable=True)
    therapist_id = Column(Integer, ForeignKey("therapists.id"), nullable=True)
    therapist_name = Column(String(255), nullable=True)
    spa_room_id = Column(Integer, ForeignKey("spa_rooms.id"), nullable=True)
    spa_room_number = Column(String(20), nullable=True)
    package_id = Column(Integer, ForeignKey("spa_packages.id"), nullable=True)
    package_name = Column(String(255), nullable=True)

    # Schedule
    appointment_date = Column(DateTime, nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    duration = Column(Integer, nullable=False)  # Minutes
    status = Column(String(20), default="pending", nullable=False)

    # Pricing
    service_price = Column(Float, nullable=False)
    therapist_price = Column(Float, default=0, nullable=False)
    room_price = Column(Float, default=0, nullable=False)
    discount = Column(Float, default=0, nullable=False)
    total_price = Column(Float, nullable=False)
    payment_status = Column(String(20), default="pending", nullable=False)

    notes = Column(Text, nullable=True)
    special_requests = Column(Text, nullable=True)
    health_notes = Column(Text, nullable=True)
    allergies = Column(JSON, default=list)
    preferences = Column(JSON, default=list)
    reminder_sent = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    guest = relationship("Guest", back_populates="spa_appointments")
    service = relationship("SpaService")
    therapist = relationship("Therapist")
    spa_room = relationship("SpaRoom")
    package = relationship("SpaPackage")


class SpaBilling(Base):
    """Invoice derived from a spa appointment"""

    __tablename__ = "spa_billings"

    id = Column(Integer, primary_key=True, index=True)
    billing_id = Column(String(50), unique=True, nullable=False, index=True)  # BIL-<ms>-<rand>
    # Plain reference: deleting the appointment must not be blocked by its invoice
    appointment_id = Column(Integer, nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False)
    guest_name = Column(String(255), nullable=False)
    guest_email = Column(String(255), nullable=True)
    guest_phone = Column(String(50), nullable=True)
    guest_address = Column(Text, nullable=True)

    invoice_date = Column(DateTime, default=utcnow)
    items = Column(JSON, default=list)  # [{description, quantity, unitPrice, subtotal}]
    subtotal = Column(Float, nullable=False)
    tax = Column(Float, default=0, nullable=False)
    discount = Column(Float, default=0, nullable=False)
    total = Column(Float, nullable=False)
    amount_paid = Column(Float, default=0, nullable=False)
    amount_due = Column(Float, nullable=False)
    payment_status = Column(String(20), default="pending", nullable=False)
    payment_method = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    appointment = relationship(
        "SpaAppointment",
        primaryjoin="foreign(SpaBilling.appointment_id) == SpaAppointment.id",
        viewonly=True,
    )
    guest = relationship("Guest")
