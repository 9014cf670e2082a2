"""Service repository - Database operations for a barber's services"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Service


class ServiceRepository:
    """Repository for service database operations"""

    @staticmethod
    def get_services(db: Session, barber_id: int) -> list[Service]:
        return (
            db.query(Service)
            .filter(Service.barber_id == barber_id)
            .order_by(Service.created_at.desc(), Service.id.desc())
            .all()
        )

    @staticmethod
    def get_service_by_id(db: Session, service_id: int, barber_id: int) -> Optional[Service]:
        """Get a service only if it belongs to the barber"""
        return (
            db.query(Service)
            .filter(Service.id == service_id, Service.barber_id == barber_id)
            .first()
        )

    @staticmethod
    def create_service(db: Session, barber_id: int, **service_data) -> Service:
        service = Service(barber_id=barber_id, **service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        """Delete a service; its past appointments keep their row with service_id set to NULL"""
        for appointment in service.appointments:
            appointment.service_id = None
        db.delete(service)
        db.commit()
