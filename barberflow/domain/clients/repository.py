"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Client


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_client_by_id(db: Session, client_id: int, shop_id: int) -> Optional[Client]:
        """Get a specific client by ID"""
        return db.query(Client).filter(Client.id == client_id, Client.shop_id == shop_id).first()

    @staticmethod
    def get_client_by_email(db: Session, email: str, shop_id: int) -> Optional[Client]:
        return db.query(Client).filter(Client.email == email, Client.shop_id == shop_id).first()

    @staticmethod
    def create_client(db: Session, shop_id: int, commit: bool = True, **client_data) -> Client:
        """Create a new client; commit=False lets callers fold it into a larger transaction"""
        client = Client(shop_id=shop_id, **client_data)
        db.add(client)
        if commit:
            db.commit()
            db.refresh(client)
        else:
            db.flush()
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        """Update a client with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(client, key):
                setattr(client, key, value)

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: Client) -> None:
        db.delete(client)
        db.commit()

    # Search and Filter Methods
    @staticmethod
    def search_clients(
        db: Session,
        shop_id: int,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Client]:
        """Search and filter clients, newest first"""
        query = db.query(Client).filter(Client.shop_id == shop_id)

        if status and status != "all":
            query = query.filter(Client.status == status)

        if search:
            search_term = f"%{search.strip().lower()}%"
            query = query.filter(
                (Client.name.ilike(search_term))
                | (Client.email.ilike(search_term))
                | (Client.phone.ilike(search_term))
            )

        return query.order_by(Client.created_at.desc(), Client.id.desc()).all()
