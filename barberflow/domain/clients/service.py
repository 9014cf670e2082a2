"""Client service - Business logic for client operations"""

import csv
import logging
from datetime import datetime
from io import StringIO
from typing import Optional

from fastapi import HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Client, User
from .repository import ClientRepository
from .schemas import ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "Client with this email already exists"


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def get_clients(
        self, user: User, status: Optional[str] = None, search: Optional[str] = None
    ) -> list[Client]:
        return self.repo.search_clients(self.db, user.id, status, search)

    def get_client(self, client_id: int, user: User) -> Client:
        """Get a specific client"""
        client = self.repo.get_client_by_id(self.db, client_id, user.id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def create_client(self, data: ClientCreate, user: User) -> Client:
        """Create a new client; email is unique within the shop"""
        if self.repo.get_client_by_email(self.db, data.email, user.id):
            raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL_MESSAGE)

        try:
            client = self.repo.create_client(
                self.db,
                user.id,
                name=data.name,
                email=data.email,
                phone=data.phone,
                notes=data.notes,
                status=data.status or "active",
            )
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL_MESSAGE) from e

        logger.info(f"📥 Client {client.id} created for user_id: {user.id}")
        return client

    def update_client(self, client_id: int, data: ClientUpdate, user: User) -> Client:
        client = self.get_client(client_id, user)

        if data.email and data.email != client.email:
            if self.repo.get_client_by_email(self.db, data.email, user.id):
                raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL_MESSAGE)

        updates = {
            "name": data.name,
            "email": data.email,
            "phone": data.phone,
            "notes": data.notes,
            "status": data.status,
        }
        try:
            return self.repo.update_client(self.db, client, **updates)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail=DUPLICATE_EMAIL_MESSAGE) from e

    def delete_client(self, client_id: int, user: User) -> dict:
        client = self.get_client(client_id, user)
        self.repo.delete_client(self.db, client)
        return {"message": "Client deleted successfully"}

    def export_clients_csv(
        self,
        user: User,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> StreamingResponse:
        """Export clients as CSV"""
        logger.info(f"📊 CSV Export requested by user {user.id} ({user.email})")

        clients = self.repo.search_clients(self.db, user.id, status, search)

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(
            [
                "ID",
                "Name",
                "Email",
                "Phone",
                "Status",
                "Total Bookings",
                "Total Spent",
                "Last Visit",
                "Notes",
                "Created At",
            ]
        )
        for client in clients:
            writer.writerow(
                [
                    client.id,
                    client.name,
                    client.email,
                    client.phone or "",
                    client.status,
                    client.total_bookings,
                    f"{client.total_spent:.2f}",
                    client.last_visit.strftime("%Y-%m-%d %H:%M:%S") if client.last_visit else "",
                    client.notes or "",
                    client.created_at.strftime("%Y-%m-%d %H:%M:%S") if client.created_at else "",
                ]
            )

        output.seek(0)
        filename = f"clients_export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
        logger.info(f"✅ CSV export successful: {filename} ({len(clients)} clients)")

        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={filename}",
                "Cache-Control": "no-cache",
            },
        )
