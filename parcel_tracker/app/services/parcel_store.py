"""
Parcel store service.

Durable CRUD over the parcel table. Each call opens a short-lived session,
issues one statement and commits. Lifecycle guards (address changes and
deletion only while REGISTERED) live in the statement predicates, so they
hold under concurrent callers without a separate read.
"""

import logging
from typing import List, Union

from sqlalchemy import select, update, delete
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from parcel_tracker.app.core.exceptions import (
    InvalidParcelStatusError,
    ParcelNotFoundError,
    PersistenceError,
)
from parcel_tracker.app.db.session import get_session_factory
from parcel_tracker.app.models.parcel import ParcelRecord
from parcel_tracker.app.models.parcel_enums import ParcelStatus
from parcel_tracker.app.schemas.parcel import Parcel

logger = logging.getLogger("parcel_tracker")

# sqlite3 raises OverflowError itself for integers outside INTEGER range
DRIVER_ERRORS = (SQLAlchemyError, OverflowError)


class ParcelStore:
    """
    Repository for parcel records.

    Holds nothing but the engine handle and a session factory bound to it,
    so one instance can be shared between threads.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = get_session_factory(engine)

    def add(self, parcel: Parcel) -> int:
        """
        Insert a new parcel.

        Args:
            parcel: Parcel to persist (its number is ignored)

        Returns:
            Store-assigned parcel number

        Raises:
            PersistenceError: If the insert fails or no number was assigned
        """
        record = ParcelRecord(
            client=parcel.client,
            status=parcel.status,
            address=parcel.address,
            created_at=parcel.created_at,
        )

        with self._session_factory() as session:
            try:
                session.add(record)
                session.commit()
            except DRIVER_ERRORS as exc:
                session.rollback()
                self._log_failure("add", exc, client=parcel.client)
                raise PersistenceError(
                    f"Failed to add parcel for client {parcel.client}",
                    operation="add",
                    details={"client": parcel.client},
                ) from exc

        if not record.number:
            raise PersistenceError(
                "Parcel was inserted but no number was assigned",
                operation="add",
                details={"client": parcel.client},
            )

        logger.debug("Parcel added", extra={"number": record.number, "client": record.client})
        return record.number

    def get(self, number: int) -> Parcel:
        """
        Fetch a parcel by number.

        Raises:
            ParcelNotFoundError: If no row has this number
            PersistenceError: If the query fails
        """
        with self._session_factory() as session:
            try:
                result = session.execute(
                    select(ParcelRecord).where(ParcelRecord.number == number)
                )
                record = result.scalar_one_or_none()
            except DRIVER_ERRORS as exc:
                self._log_failure("get", exc, number=number)
                raise PersistenceError(
                    f"Failed to fetch parcel {number}",
                    operation="get",
                    details={"number": number},
                ) from exc

        if record is None:
            raise ParcelNotFoundError(number)

        return Parcel.model_validate(record)

    def get_by_client(self, client: int) -> List[Parcel]:
        """
        Fetch every parcel owned by a client, in insertion order.

        Returns an empty list when the client has no parcels.
        """
        with self._session_factory() as session:
            try:
                result = session.execute(
                    select(ParcelRecord)
                    .where(ParcelRecord.client == client)
                    .order_by(ParcelRecord.number)
                )
                records = result.scalars().all()
            except DRIVER_ERRORS as exc:
                self._log_failure("get_by_client", exc, client=client)
                raise PersistenceError(
                    f"Failed to fetch parcels for client {client}",
                    operation="get_by_client",
                    details={"client": client},
                ) from exc

        return [Parcel.model_validate(record) for record in records]

    def set_address(self, number: int, address: str) -> bool:
        """
        Change the delivery address of a REGISTERED parcel.

        The status check is part of the UPDATE predicate. A parcel that is
        missing or already sent/delivered is left untouched.

        Returns:
            True if the address was changed, False otherwise
        """
        statement = (
            update(ParcelRecord)
            .where(
                ParcelRecord.number == number,
                ParcelRecord.status == ParcelStatus.REGISTERED,
            )
            .values(address=address)
        )
        changed = self._execute_write("set_address", statement, number=number)

        if not changed:
            logger.info("Address not changed, parcel missing or not registered", extra={"number": number})
        return changed

    def set_status(self, number: int, status: Union[ParcelStatus, str]) -> bool:
        """
        Set the status of a parcel.

        No transition policy is applied here; callers decide which
        transitions are allowed.

        Returns:
            True if a row matched, False if the parcel does not exist

        Raises:
            InvalidParcelStatusError: If status is not a ParcelStatus value
        """
        try:
            status = ParcelStatus(status)
        except ValueError:
            raise InvalidParcelStatusError(status) from None

        statement = (
            update(ParcelRecord)
            .where(ParcelRecord.number == number)
            .values(status=status)
        )
        return self._execute_write("set_status", statement, number=number, status=status.value)

    def delete(self, number: int) -> bool:
        """
        Physically remove a REGISTERED parcel.

        Parcels that are sent or delivered are kept.

        Returns:
            True if the row was removed, False otherwise
        """
        statement = delete(ParcelRecord).where(
            ParcelRecord.number == number,
            ParcelRecord.status == ParcelStatus.REGISTERED,
        )
        removed = self._execute_write("delete", statement, number=number)

        if not removed:
            logger.info("Parcel not deleted, parcel missing or not registered", extra={"number": number})
        return removed

    def _execute_write(self, operation: str, statement, **context) -> bool:
        """Run a single UPDATE/DELETE and report whether any row matched."""
        with self._session_factory() as session:
            try:
                rowcount = session.execute(statement).rowcount
                session.commit()
            except DRIVER_ERRORS as exc:
                session.rollback()
                self._log_failure(operation, exc, **context)
                raise PersistenceError(
                    f"Failed to {operation.replace('_', ' ')} for parcel {context.get('number')}",
                    operation=operation,
                    details=context,
                ) from exc

        logger.debug("Parcel write", extra={"operation": operation, "rowcount": rowcount, **context})
        return rowcount > 0

    @staticmethod
    def _log_failure(operation: str, exc: Exception, **context) -> None:
        logger.error(
            "Parcel store operation failed",
            extra={"operation": operation, "error": str(exc), **context},
            exc_info=exc,
        )
