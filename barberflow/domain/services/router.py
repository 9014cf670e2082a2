"""Services router - FastAPI endpoints for the service catalogue"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Service, User
from ...schemas import MessageResponse
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import CatalogService

router = APIRouter(prefix="/services", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


def service_to_response(s: Service) -> ServiceResponse:
    return ServiceResponse(
        id=s.id,
        name=s.name,
        description=s.description,
        duration=s.duration,
        price=s.price,
        category=s.category,
        isActive=s.is_active,
        createdAt=s.created_at,
    )


@router.get("", response_model=list[ServiceResponse])
async def get_services(
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return [service_to_response(s) for s in service.get_services(current_user)]


@router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service_to_response(service.create_service(data, current_user))


@router.patch("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service_to_response(service.update_service(service_id, data, current_user))


@router.delete("/{service_id}", response_model=MessageResponse)
async def delete_service(
    service_id: int,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.delete_service(service_id, current_user)
