# backend/fintrack/services/resources.py
"""
Owner-scoped persistence for user records.

Every read and write is filtered by ``owner_id``. A record that belongs
to someone else is treated exactly like a record that does not exist, so
callers cannot probe for other users' ids.

Usage:
    transactions = OwnedResourceService(Transaction, "Transaction")
    record = transactions.get(db, owner_id=identity.user_id, record_id=42)
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from fintrack.models import Base, Budget, Investment, Transaction
from fintrack.services.constants import DEFAULT_LIST_LIMIT
from fintrack.services.exceptions import ResourceNotFoundError


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# Fields clients may never set through create/update payloads
PROTECTED_FIELDS = frozenset({"id", "owner_id", "created_at", "updated_at"})


class OwnedResourceService(Generic[ModelT]):
    """
    CRUD operations on one model, always scoped to a single owner.

    Attributes:
        model: SQLAlchemy model class with an ``owner_id`` column
        resource_type: Display name used in not-found errors
        order_by: Column used for newest-first listing
    """

    def __init__(
        self,
        model: type[ModelT],
        resource_type: str,
        order_by: Any = None,
    ) -> None:
        self.model = model
        self.resource_type = resource_type
        self.order_by = order_by if order_by is not None else model.created_at

    def list_all(
        self,
        db: Session,
        owner_id: str,
        filters: Sequence[ColumnElement[bool]] = (),
        skip: int = 0,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[ModelT]:
        """Return the owner's records, newest first."""
        query = (
            select(self.model)
            .where(self.model.owner_id == owner_id, *filters)
            .order_by(self.order_by.desc(), self.model.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(db.scalars(query).all())

    def get(self, db: Session, owner_id: str, record_id: int) -> ModelT:
        """
        Fetch one of the owner's records.

        Raises:
            ResourceNotFoundError: If no such record exists for this owner
        """
        record = db.execute(
            select(self.model).where(
                self.model.id == record_id,
                self.model.owner_id == owner_id,
            )
        ).scalar_one_or_none()

        if record is None:
            raise ResourceNotFoundError(self.resource_type, record_id)

        return record

    def create(self, db: Session, owner_id: str, data: dict[str, Any]) -> ModelT:
        """Create a record owned by ``owner_id``; ownership never comes from the payload."""
        values = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
        record = self.model(**values, owner_id=owner_id)

        db.add(record)
        db.commit()
        db.refresh(record)

        logger.info(f"{self.resource_type} {record.id} created")
        return record

    def update(
        self,
        db: Session,
        owner_id: str,
        record_id: int,
        data: dict[str, Any],
    ) -> ModelT:
        """
        Apply a partial update to one of the owner's records.

        Raises:
            ResourceNotFoundError: If no such record exists for this owner
        """
        record = self.get(db, owner_id, record_id)

        for field, value in data.items():
            if field in PROTECTED_FIELDS:
                continue
            setattr(record, field, value)

        db.commit()
        db.refresh(record)

        logger.info(f"{self.resource_type} {record.id} updated")
        return record

    def delete(self, db: Session, owner_id: str, record_id: int) -> None:
        """
        Delete one of the owner's records.

        Raises:
            ResourceNotFoundError: If no such record exists for this owner
        """
        record = self.get(db, owner_id, record_id)

        db.delete(record)
        db.commit()

        logger.info(f"{self.resource_type} {record_id} deleted")

    def delete_all(self, db: Session, owner_id: str) -> int:
        """Delete every record the owner has. Does not commit."""
        result = db.execute(
            delete(self.model).where(self.model.owner_id == owner_id)
        )
        return result.rowcount or 0


transaction_service: OwnedResourceService[Transaction] = OwnedResourceService(
    Transaction, "Transaction", order_by=Transaction.date,
)
budget_service: OwnedResourceService[Budget] = OwnedResourceService(
    Budget, "Budget", order_by=Budget.start_date,
)
investment_service: OwnedResourceService[Investment] = OwnedResourceService(
    Investment, "Investment", order_by=Investment.purchase_date,
)


@dataclass
class ClearedData:
    """Row counts removed by clear_user_data()."""
    transactions: int
    budgets: int
    investments: int


def clear_user_data(db: Session, owner_id: str) -> ClearedData:
    """
    Remove all of a user's transactions, budgets and investments.

    The user account itself is kept. Runs as a single commit.
    """
    cleared = ClearedData(
        transactions=transaction_service.delete_all(db, owner_id),
        budgets=budget_service.delete_all(db, owner_id),
        investments=investment_service.delete_all(db, owner_id),
    )
    db.commit()

    logger.info(
        f"Cleared user data: {cleared.transactions} transactions, "
        f"{cleared.budgets} budgets, {cleared.investments} investments"
    )
    return cleared
