"""Spa router - FastAPI endpoints for spa catalog, appointments and billing"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthenticatedUser, get_current_user
from ...database import get_db
from ...models_spa import SpaPackage, SpaRoom, SpaService, Therapist
from ...shared.schemas import CamelModel, MessageResponse
from .schemas import (
    AppointmentActionResponse,
    AppointmentStatusUpdate,
    BillingPaymentRecord,
    BillingSummaryResponse,
    SpaAppointmentCreate,
    SpaAppointmentResponse,
    SpaAppointmentUpdate,
    SpaBillingCreate,
    SpaBillingResponse,
    SpaBillingUpdate,
    SpaPackageCreate,
    SpaPackageResponse,
    SpaPackageUpdate,
    SpaRoomCreate,
    SpaRoomResponse,
    SpaRoomUpdate,
    SpaServiceCreate,
    SpaServiceResponse,
    SpaServiceUpdate,
    TherapistCreate,
    TherapistResponse,
    TherapistUpdate,
)
from .service import SpaAppointmentService, SpaBillingService, SpaCatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spa", tags=["Spa & Wellness"])


def get_catalog_service(db: Session = Depends(get_db)) -> SpaCatalogService:
    """Dependency injection for SpaCatalogService"""
    return SpaCatalogService(db)


def get_appointment_service(db: Session = Depends(get_db)) -> SpaAppointmentService:
    """Dependency injection for SpaAppointmentService"""
    return SpaAppointmentService(db)


def get_billing_service(db: Session = Depends(get_db)) -> SpaBillingService:
    """Dependency injection for SpaBillingService"""
    return SpaBillingService(db)


# ============================================================================
# CATALOG: SERVICES, THERAPISTS, ROOMS, PACKAGES
# ============================================================================


def register_catalog_routes(
    path: str,
    model,
    label: str,
    key: str,
    create_schema: type[CamelModel],
    update_schema: type[CamelModel],
    response_schema: type[CamelModel],
) -> None:
    """Attach list/get/create/update/toggle/delete endpoints for one catalog model"""

    async def list_records(service: SpaCatalogService = Depends(get_catalog_service)):
        records = service.list_records(model)
        logger.debug(f"Fetched {len(records)} {path}")
        return records

    async def get_record(record_id: int, service: SpaCatalogService = Depends(get_catalog_service)):
        return service.get(model, record_id, label)

    async def create_record(
        data: create_schema,
        current_user: AuthenticatedUser = Depends(get_current_user),
        service: SpaCatalogService = Depends(get_catalog_service),
    ):
        return service.create(model, data, current_user)

    async def update_record(
        record_id: int,
        data: update_schema,
        current_user: AuthenticatedUser = Depends(get_current_user),
        service: SpaCatalogService = Depends(get_catalog_service),
    ):
        return service.update(model, record_id, data, label)

    async def toggle_record(
        record_id: int,
        current_user: AuthenticatedUser = Depends(get_current_user),
        service: SpaCatalogService = Depends(get_catalog_service),
    ):
        record, message = service.toggle(model, record_id, label)
        return {"success": True, "message": message, key: response_schema.model_validate(record)}

    async def delete_record(
        record_id: int,
        current_user: AuthenticatedUser = Depends(get_current_user),
        service: SpaCatalogService = Depends(get_catalog_service),
    ):
        snapshot, message = service.delete(model, record_id, label, response_schema)
        return {"success": True, "message": message, key: snapshot}

    router.add_api_route(
        f"/{path}", list_records, methods=["GET"], response_model=list[response_schema],
        summary=f"List {path}",
    )
    router.add_api_route(
        f"/{path}/{{record_id}}", get_record, methods=["GET"], response_model=response_schema,
        summary=f"Get {key}",
    )
    router.add_api_route(
        f"/{path}", create_record, methods=["POST"], response_model=response_schema,
        status_code=201, summary=f"Create {key}",
    )
    router.add_api_route(
        f"/{path}/{{record_id}}", update_record, methods=["PUT"], response_model=response_schema,
        summary=f"Update {key}",
    )
    router.add_api_route(
        f"/{path}/{{record_id}}/toggle", toggle_record, methods=["PATCH"], summary=f"Toggle {key} active",
    )
    router.add_api_route(
        f"/{path}/{{record_id}}", delete_record, methods=["DELETE"], summary=f"Delete {key}",
    )


register_catalog_routes(
    "services", SpaService, "Service", "service", SpaServiceCreate, SpaServiceUpdate, SpaServiceResponse
)
register_catalog_routes(
    "therapists", Therapist, "Therapist", "therapist", TherapistCreate, TherapistUpdate, TherapistResponse
)
register_catalog_routes("rooms", SpaRoom, "Room", "room", SpaRoomCreate, SpaRoomUpdate, SpaRoomResponse)
register_catalog_routes(
    "packages", SpaPackage, "Package", "package", SpaPackageCreate, SpaPackageUpdate, SpaPackageResponse
)


# ============================================================================
# APPOINTMENTS
# ============================================================================


@router.get("/appointments", response_model=list[SpaAppointmentResponse])
async def get_appointments(service: SpaAppointmentService = Depends(get_appointment_service)):
    """Get all appointments with service, therapist, room and package populated"""
    return service.get_appointments()


@router.get("/appointments/{appointment_id}", response_model=SpaAppointmentResponse)
async def get_appointment(
    appointment_id: int,
    service: SpaAppointmentService = Depends(get_appointment_service),
):
    """Get a specific appointment"""
    return service.get_appointment(appointment_id)


@router.post("/appointments", response_model=SpaAppointmentResponse, status_code=201)
async def create_appointment(
    data: SpaAppointmentCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SpaAppointmentService = Depends(get_appointment_service),
):
    """Book an appointment; an invoice is created alongside on a best-effort basis"""
    return service.create_appointment(data, current_user)


@router.put("/appointments/{appointment_id}", response_model=SpaAppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: SpaAppointmentUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SpaAppointmentService = Depends(get_appointment_service),
):
    """Edit an appointment and regenerate its invoice if it has one"""
    return service.update_appointment(appointment_id, data, current_user)


@router.delete("/appointments/{appointment_id}", response_model=AppointmentActionResponse)
async def delete_appointment(
    appointment_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SpaAppointmentService = Depends(get_appointment_service),
):
    """Delete an appointment and its invoice"""
    appointment = service.delete_appointment(appointment_id, current_user)
    return AppointmentActionResponse(
        message="Appointment and associated billing permanently deleted", appointment=appointment
    )


@router.patch("/appointments/{appointment_id}/status", response_model=AppointmentActionResponse)
async def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SpaAppointmentService = Depends(get_appointment_service),
):
    """Set an appointment's status; the invoice is not touched"""
    appointment = service.update_status(appointment_id, data.status)
    return AppointmentActionResponse(
        message="Appointment status updated",
        appointment=SpaAppointmentResponse.model_validate(appointment),
    )


# ============================================================================
# BILLING
# ============================================================================


@router.get("/billing", response_model=list[SpaBillingResponse])
async def get_billings(service: SpaBillingService = Depends(get_billing_service)):
    """Get all billing records with appointment and guest summaries"""
    return service.get_billings()


@router.get("/billing/summary", response_model=BillingSummaryResponse)
async def get_billing_summary(service: SpaBillingService = Depends(get_billing_service)):
    """Collected revenue and outstanding amounts across all invoices"""
    return service.summarize()


@router.get("/billing/appointment/{appointment_id}", response_model=SpaBillingResponse)
async def get_billing_for_appointment(
    appointment_id: int,
    service: SpaBillingService = Depends(get_billing_service),
):
    """Get the billing record of an appointment"""
    return service.get_billing_for_appointment(appointment_id)


@router.get("/billing/{billing_id}", response_model=SpaBillingResponse)
async def get_billing(
    billing_id: int,
    service: SpaBillingService = Depends(get_billing_service),
):
    """Get a billing record"""
    return service.get_billing(billing_id)


@router.post("/billing", response_model=SpaBillingResponse, status_code=201)
async def create_billing(
    data: SpaBillingCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SpaBillingService = Depends(get_billing_service),
):
    """Enter a billing record by hand"""
    return service.create_billing(data, current_user)


@router.put("/billing/{billing_id}", response_model=SpaBillingResponse)
async def update_billing(
    billing_id: int,
    data: SpaBillingUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SpaBillingService = Depends(get_billing_service),
):
    """Edit a billing record directly; the appointment is not updated"""
    return service.update_billing(billing_id, data, current_user)


@router.patch("/billing/{billing_id}/payment", response_model=SpaBillingResponse)
async def record_billing_payment(
    billing_id: int,
    data: BillingPaymentRecord,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SpaBillingService = Depends(get_billing_service),
):
    """Record the amount paid; total and amount due are rebalanced"""
    return service.record_payment(billing_id, data, current_user)


@router.delete("/billing/{billing_id}", response_model=MessageResponse)
async def delete_billing(
    billing_id: int,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SpaBillingService = Depends(get_billing_service),
):
    """Delete a billing record"""
    return service.delete_billing(billing_id, current_user)
