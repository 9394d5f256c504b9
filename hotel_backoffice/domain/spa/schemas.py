"""Spa domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from ...shared.schemas import CamelModel
from ...shared.validators import validate_email, validate_time_of_day

ServiceCategory = Literal["massage", "facial", "body-treatment", "therapy", "wellness", "other"]
RoomType = Literal["single", "double", "suite", "vip"]
RoomStatus = Literal["available", "occupied", "maintenance", "reserved"]
PackageType = Literal["single-service", "bundle", "membership", "package-deal"]
DiscountType = Literal["price", "percentage"]
Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
AppointmentStatus = Literal["pending", "confirmed", "in-progress", "completed", "cancelled", "no-show"]
AppointmentPaymentStatus = Literal["pending", "partial", "paid", "refunded"]
BillingPaymentStatus = Literal["pending", "partial", "paid", "refunded", "cancelled"]
PaymentMethod = Literal["cash", "card", "transfer", "cheque", "other"]


# ============================================================================
# SPA SERVICES
# ============================================================================


class SpaServiceCreate(CamelModel):
    """Schema for creating a spa service"""

    service_name: str = Field(..., min_length=1)
    category: ServiceCategory
    description: str
    duration: int = Field(..., ge=15, le=480)
    base_price: float = Field(..., ge=0)
    is_active: bool = True
    max_capacity: int = Field(1, ge=1, le=10)
    benefits: list[str] = Field(default_factory=list)

    @field_validator("service_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class SpaServiceUpdate(CamelModel):
    """Schema for updating a spa service"""

    service_name: Optional[str] = Field(None, min_length=1)
    category: Optional[ServiceCategory] = None
    description: Optional[str] = None
    duration: Optional[int] = Field(None, ge=15, le=480)
    base_price: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None
    max_capacity: Optional[int] = Field(None, ge=1, le=10)
    benefits: Optional[list[str]] = None


class SpaServiceResponse(CamelModel):
    id: int
    service_name: str
    category: str
    description: str
    duration: int
    base_price: float
    is_active: bool
    max_capacity: int
    benefits: Optional[list[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SpaServiceSummary(CamelModel):
    id: int
    service_name: str
    base_price: float
    duration: Optional[int] = None


# ============================================================================
# THERAPISTS
# ============================================================================


class Certification(CamelModel):
    name: Optional[str] = None
    issue_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    certificate_number: Optional[str] = None


class DayAvailability(CamelModel):
    start: Optional[str] = None
    end: Optional[str] = None
    available: bool = False

    @field_validator("start", "end")
    @classmethod
    def validate_clock(cls, v: Optional[str]) -> Optional[str]:
        return validate_time_of_day(v) if v else v


class TherapistCreate(CamelModel):
    """Schema for creating a therapist"""

    name: str = Field(..., min_length=1)
    email: str
    phone: str
    specializations: list[str] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    experience: int = Field(0, ge=0)
    hourly_rate: float = Field(..., ge=0)
    bio: Optional[str] = None
    availability: Optional[dict[Weekday, DayAvailability]] = None
    is_active: bool = True
    total_appointments: int = Field(0, ge=0)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return validate_email(v)


class TherapistUpdate(CamelModel):
    """Schema for updating a therapist"""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    specializations: Optional[list[str]] = None
    certifications: Optional[list[Certification]] = None
    experience: Optional[int] = Field(None, ge=0)
    hourly_rate: Optional[float] = Field(None, ge=0)
    bio: Optional[str] = None
    availability: Optional[dict[Weekday, DayAvailability]] = None
    is_active: Optional[bool] = None
    total_appointments: Optional[int] = Field(None, ge=0)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return validate_email(v)


class TherapistResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: str
    specializations: Optional[list[str]] = None
    certifications: Optional[list[Certification]] = None
    experience: int
    hourly_rate: float
    bio: Optional[str] = None
    availability: Optional[dict[str, DayAvailability]] = None
    is_active: bool
    total_appointments: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TherapistSummary(CamelModel):
    id: int
    name: str
    hourly_rate: float


# ============================================================================
# SPA ROOMS
# ============================================================================


class SpaRoomCreate(CamelModel):
    """Schema for creating a spa room"""

    room_number: str = Field(..., min_length=1)
    room_type: RoomType
    capacity: int = Field(..., ge=1)
    amenities: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    status: RoomStatus = "available"
    hourly_rate: float = Field(..., ge=0)
    is_active: bool = True


class SpaRoomUpdate(CamelModel):
    """Schema for updating a spa room"""

    room_number: Optional[str] = Field(None, min_length=1)
    room_type: Optional[RoomType] = None
    capacity: Optional[int] = Field(None, ge=1)
    amenities: Optional[list[str]] = None
    features: Optional[list[str]] = None
    status: Optional[RoomStatus] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class SpaRoomResponse(CamelModel):
    id: int
    room_number: str
    room_type: str
    capacity: int
    amenities: Optional[list[str]] = None
    features: Optional[list[str]] = None
    status: str
    hourly_rate: float
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SpaRoomSummary(CamelModel):
    id: int
    room_number: str
    hourly_rate: float


# ============================================================================
# SPA PACKAGES
# ============================================================================


class PackageServiceLine(CamelModel):
    service_id: int
    quantity: int = Field(1, ge=1)
    discount: float = Field(0, ge=0, le=100)


class PackageServiceLineResponse(CamelModel):
    service_id: int
    quantity: int
    discount: float
    service: Optional[SpaServiceSummary] = None


class SpaPackageCreate(CamelModel):
    """Schema for creating a spa package"""

    package_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    package_type: PackageType
    services: list[PackageServiceLine] = Field(default_factory=list)
    total_duration: Optional[int] = Field(None, ge=0)
    original_price: float = Field(..., ge=0)
    discount_type: DiscountType = "percentage"
    discount_value: float = Field(0, ge=0)
    final_price: Optional[float] = Field(None, ge=0)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True


class SpaPackageUpdate(CamelModel):
    """Schema for updating a spa package"""

    package_name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    package_type: Optional[PackageType] = None
    services: Optional[list[PackageServiceLine]] = None
    total_duration: Optional[int] = Field(None, ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = Field(None, ge=0)
    final_price: Optional[float] = Field(None, ge=0)
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: Optional[bool] = None


class SpaPackageResponse(CamelModel):
    id: int
    package_name: str
    description: Optional[str] = None
    package_type: str
    services: list[PackageServiceLineResponse] = Field(default_factory=list)
    total_duration: Optional[int] = None
    original_price: float
    discount_type: str
    discount_value: float
    final_price: Optional[float] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SpaPackageSummary(CamelModel):
    id: int
    package_name: str
    final_price: Optional[float] = None


# ============================================================================
# APPOINTMENTS
# ============================================================================


class SpaAppointmentCreate(CamelModel):
    """Schema for booking a spa appointment"""

    guest_id: int
    guest_name: Optional[str] = Field(None, min_length=1)  # Filled from the guest record when omitted
    guest_phone: Optional[str] = None
    guest_email: Optional[str] = None
    room_number: Optional[str] = None
    service: int
    service_name: Optional[str] = None
    therapist: Optional[int] = None
    therapist_name: Optional[str] = None
    spa_room: Optional[int] = None
    spa_room_number: Optional[str] = None
    package: Optional[int] = None
    package_name: Optional[str] = None
    appointment_date: datetime
    start_time: str
    end_time: str
    duration: int = Field(..., ge=0)
    status: AppointmentStatus = "pending"
    service_price: float = Field(..., ge=0)
    therapist_price: float = Field(0, ge=0)
    room_price: float = Field(0, ge=0)
    discount: float = Field(0, ge=0)
    total_price: float = Field(..., ge=0)
    payment_status: AppointmentPaymentStatus = "pending"
    notes: Optional[str] = None
    special_requests: Optional[str] = None
    health_notes: Optional[str] = None
    allergies: list[str] = Field(default_factory=list)
    preferences: list[str] = Field(default_factory=list)
    reminder_sent: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock(cls, v: str) -> str:
        return validate_time_of_day(v)


class SpaAppointmentUpdate(CamelModel):
    """Schema for editing an appointment; only supplied fields are written"""

    guest_id: Optional[int] = None
    guest_name: Optional[str] = Field(None, min_length=1)
    guest_phone: Optional[str] = None
    guest_email: Optional[str] = None
    room_number: Optional[str] = None
    service: Optional[int] = None
    service_name: Optional[str] = None
    therapist: Optional[int] = None
    therapist_name: Optional[str] = None
    spa_room: Optional[int] = None
    spa_room_number: Optional[str] = None
    package: Optional[int] = None
    package_name: Optional[str] = None
    appointment_date: Optional[datetime] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
    status: Optional[AppointmentStatus] = None
    service_price: Optional[float] = Field(None, ge=0)
    therapist_price: Optional[float] = Field(None, ge=0)
    room_price: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0)
    total_price: Optional[float] = Field(None, ge=0)
    payment_status: Optional[AppointmentPaymentStatus] = None
    notes: Optional[str] = None
    special_requests: Optional[str] = None
    health_notes: Optional[str] = None
    allergies: Optional[list[str]] = None
    preferences: Optional[list[str]] = None
    reminder_sent: Optional[bool] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock(cls, v: Optional[str]) -> Optional[str]:
        return validate_time_of_day(v)


class AppointmentStatusUpdate(CamelModel):
    status: AppointmentStatus


class SpaAppointmentResponse(CamelModel):
    id: int
    appointment_id: str
    guest_id: int
    guest_name: str
    guest_phone: Optional[str] = None
    guest_email: Optional[str] = None
    room_number: Optional[str] = None
    service: Optional[SpaServiceSummary] = None
    service_name: Optional[str] = None
    therapist: Optional[TherapistSummary] = None
    therapist_name: Optional[str] = None
    spa_room: Optional[SpaRoomSummary] = None
    spa_room_number: Optional[str] = None
    package: Optional[SpaPackageSummary] = None
    package_name: Optional[str] = None
    appointment_date: datetime
    start_time: str
    end_time: str
    duration: int
    status: str
    service_price: float
    therapist_price: float
    room_price: float
    discount: float
    total_price: float
    payment_status: str
    notes: Optional[str] = None
    special_requests: Optional[str] = None
    health_notes: Optional[str] = None
    allergies: Optional[list[str]] = None
    preferences: Optional[list[str]] = None
    reminder_sent: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AppointmentActionResponse(CamelModel):
    """Status-change and delete responses carry a message plus the appointment"""

    message: str
    appointment: SpaAppointmentResponse


# ============================================================================
# BILLING
# ============================================================================


class BillingItem(CamelModel):
    description: str
    quantity: int = 1
    unit_price: float
    subtotal: float


class BillingAppointmentSummary(CamelModel):
    id: int
    appointment_id: str
    guest_name: str
    guest_phone: Optional[str] = None
    guest_email: Optional[str] = None
    package_name: Optional[str] = None
    therapist_name: Optional[str] = None
    service_name: Optional[str] = None


class BillingGuestSummary(CamelModel):
    id: int
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class SpaBillingCreate(CamelModel):
    """Schema for a manually entered billing record"""

    appointment_id: int
    guest_id: int
    guest_name: str = Field(..., min_length=1)
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_address: Optional[str] = None
    invoice_date: Optional[datetime] = None
    items: list[BillingItem] = Field(default_factory=list)
    subtotal: float = Field(..., ge=0)
    tax: float = Field(0, ge=0)
    discount: float = Field(0, ge=0)
    total: float = Field(..., ge=0)
    amount_paid: float = Field(0, ge=0)
    amount_due: float = Field(..., ge=0)
    payment_status: BillingPaymentStatus = "pending"
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    due_date: Optional[datetime] = None


class SpaBillingUpdate(CamelModel):
    """Schema for direct billing edits; never synced back to the appointment"""

    guest_name: Optional[str] = Field(None, min_length=1)
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_address: Optional[str] = None
    invoice_date: Optional[datetime] = None
    items: Optional[list[BillingItem]] = None
    subtotal: Optional[float] = Field(None, ge=0)
    tax: Optional[float] = Field(None, ge=0)
    discount: Optional[float] = Field(None, ge=0)
    total: Optional[float] = Field(None, ge=0)
    amount_paid: Optional[float] = Field(None, ge=0)
    amount_due: Optional[float] = Field(None, ge=0)
    payment_status: Optional[BillingPaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    due_date: Optional[datetime] = None


class SpaBillingResponse(CamelModel):
    id: int
    billing_id: str
    appointment_id: int
    appointment: Optional[BillingAppointmentSummary] = None
    guest_id: int
    guest: Optional[BillingGuestSummary] = None
    guest_name: str
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_address: Optional[str] = None
    invoice_date: Optional[datetime] = None
    items: list[BillingItem] = Field(default_factory=list)
    subtotal: float
    tax: float
    discount: float
    total: float
    amount_paid: float
    amount_due: float
    payment_status: str
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BillingPaymentRecord(CamelModel):
    """Payment taken against an invoice; total and amount due are rebalanced"""

    amount_paid: float = Field(..., ge=0)
    payment_method: Optional[PaymentMethod] = None
    payment_status: Optional[BillingPaymentStatus] = None
    notes: Optional[str] = None


class BillingSummaryResponse(CamelModel):
    invoice_count: int
    total_revenue: float
    pending_payments: float
