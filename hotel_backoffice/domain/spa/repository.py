"""Spa repository - Database operations for catalog, appointments and billing"""

from typing import Optional, TypeVar

from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Guest
from ...models_spa import SpaAppointment, SpaBilling, SpaPackage, SpaPackageService

ModelT = TypeVar("ModelT")


class SpaRepository:
    """Repository for spa catalog and appointment database operations"""

    # Catalog (services, therapists, rooms, packages)
    @staticmethod
    def list_all(db: Session, model: type[ModelT]) -> list[ModelT]:
        """Get all rows of a catalog model"""
        query = db.query(model)
        if model is SpaPackage:
            query = query.options(selectinload(SpaPackage.services).joinedload(SpaPackageService.service))
        return query.order_by(model.id).all()

    @staticmethod
    def get_by_id(db: Session, model: type[ModelT], record_id: int) -> Optional[ModelT]:
        """Get a catalog row by ID"""
        return db.query(model).filter(model.id == record_id).first()

    @staticmethod
    def create(db: Session, model: type[ModelT], **data) -> ModelT:
        """Create a catalog row"""
        record = model(**data)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def update(db: Session, record: ModelT, **updates) -> ModelT:
        """Write the supplied fields onto a row"""
        for key, value in updates.items():
            if hasattr(record, key):
                setattr(record, key, value)

        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def delete(db: Session, record) -> None:
        """Delete a row"""
        db.delete(record)
        db.commit()

    @staticmethod
    def replace_package_services(db: Session, package: SpaPackage, lines: list[dict]) -> None:
        """Swap a package's service lines; committed by the caller"""
        package.services = [SpaPackageService(**line) for line in lines]

    # Appointments
    @staticmethod
    def _appointment_query(db: Session):
        return db.query(SpaAppointment).options(
            joinedload(SpaAppointment.service),
            joinedload(SpaAppointment.therapist),
            joinedload(SpaAppointment.spa_room),
            joinedload(SpaAppointment.package),
        )

    @staticmethod
    def get_appointments(db: Session) -> list[SpaAppointment]:
        """Get all appointments with populated references"""
        return (
            SpaRepository._appointment_query(db)
            .order_by(SpaAppointment.appointment_date.desc(), SpaAppointment.id.desc())
            .all()
        )

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: int) -> Optional[SpaAppointment]:
        """Get a specific appointment with populated references"""
        return SpaRepository._appointment_query(db).filter(SpaAppointment.id == appointment_id).first()

    @staticmethod
    def get_guest_by_id(db: Session, guest_id: int) -> Optional[Guest]:
        return db.query(Guest).filter(Guest.id == guest_id).first()


class SpaBillingRepository:
    """Repository for spa billing database operations"""

    @staticmethod
    def _billing_query(db: Session):
        return db.query(SpaBilling).options(
            joinedload(SpaBilling.appointment),
            joinedload(SpaBilling.guest),
        )

    @staticmethod
    def get_billings(db: Session) -> list[SpaBilling]:
        """Get all billing records, newest invoice first"""
        return (
            SpaBillingRepository._billing_query(db)
            .order_by(SpaBilling.invoice_date.desc(), SpaBilling.id.desc())
            .all()
        )

    @staticmethod
    def get_billing_by_id(db: Session, billing_id: int) -> Optional[SpaBilling]:
        """Get a billing record by ID"""
        return SpaBillingRepository._billing_query(db).filter(SpaBilling.id == billing_id).first()

    @staticmethod
    def get_billing_by_appointment(db: Session, appointment_id: int) -> Optional[SpaBilling]:
        """Get the billing record referencing an appointment"""
        return (
            SpaBillingRepository._billing_query(db)
            .filter(SpaBilling.appointment_id == appointment_id)
            .order_by(SpaBilling.id)
            .first()
        )

    @staticmethod
    def create_billing(db: Session, **billing_data) -> SpaBilling:
        """Create a billing record"""
        billing = SpaBilling(**billing_data)
        db.add(billing)
        db.commit()
        db.refresh(billing)
        return billing

    @staticmethod
    def update_billing(db: Session, billing: SpaBilling, **updates) -> SpaBilling:
        """Write the supplied fields onto a billing record"""
        for key, value in updates.items():
            if hasattr(billing, key):
                setattr(billing, key, value)

        db.commit()
        db.refresh(billing)
        return billing

    @staticmethod
    def delete_billing(db: Session, billing: SpaBilling) -> None:
        db.delete(billing)
        db.commit()

    @staticmethod
    def delete_billings_for_appointment(db: Session, appointment_id: int) -> int:
        """Delete every billing record referencing an appointment; returns the count"""
        deleted = (
            db.query(SpaBilling)
            .filter(SpaBilling.appointment_id == appointment_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted
