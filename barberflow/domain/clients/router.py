"""Client router - FastAPI endpoints for client operations"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Client, User
from ...schemas import MessageResponse
from .schemas import ClientCreate, ClientResponse, ClientUpdate
from .service import ClientService

router = APIRouter(prefix="/clients", tags=["Clients"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


def client_to_response(c: Client) -> ClientResponse:
    return ClientResponse(
        id=c.id,
        name=c.name,
        email=c.email,
        phone=c.phone,
        notes=c.notes,
        status=c.status,
        totalBookings=c.total_bookings,
        totalSpent=c.total_spent,
        lastVisit=c.last_visit,
        createdAt=c.created_at,
    )


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("", response_model=list[ClientResponse])
async def get_clients(
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
):
    """Get the shop's clients, newest first"""
    return [client_to_response(c) for c in service.get_clients(current_user, status, search)]


@router.get("/export")
async def export_clients_csv(
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
):
    """Export clients as CSV with optional filters"""
    return service.export_clients_csv(current_user, status, search)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    return client_to_response(service.get_client(client_id, current_user))


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    return client_to_response(service.create_client(data, current_user))


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    return client_to_response(service.update_client(client_id, data, current_user))


@router.delete("/{client_id}", response_model=MessageResponse)
async def delete_client(
    client_id: int,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    return service.delete_client(client_id, current_user)
