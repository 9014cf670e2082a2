"""Service catalogue business logic"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Service, User
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for a barber's service catalogue"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def get_services(self, user: User) -> list[Service]:
        return self.repo.get_services(self.db, user.id)

    def get_service(self, service_id: int, user: User) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id, user.id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        return service

    def create_service(self, data: ServiceCreate, user: User) -> Service:
        service = self.repo.create_service(
            self.db,
            user.id,
            name=data.name,
            description=data.description,
            duration=data.duration,
            price=data.price,
            category=data.category or "General",
            is_active=data.isActive,
        )
        logger.info(f"✂️ Service created for user {user.id}: {service.name} ({service.duration} min)")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate, user: User) -> Service:
        service = self.get_service(service_id, user)

        updates = {
            "name": data.name,
            "description": data.description,
            "duration": data.duration,
            "price": data.price,
            "category": data.category,
            "is_active": data.isActive,
        }
        return self.repo.update_service(self.db, service, **updates)

    def delete_service(self, service_id: int, user: User) -> dict:
        service = self.get_service(service_id, user)
        self.repo.delete_service(self.db, service)
        logger.info(f"🗑️ Service {service_id} deleted by user {user.id}")
        return {"message": "Service removed"}
