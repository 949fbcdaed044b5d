"""Service call requests (bill, napkin, cleaning)"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.models.call_request import CallRequest, CallRequestStatus
from tableside.schemas.call_request import CallRequestCreate
from tableside.services.claims import ClaimCoordinator, call_request_claims, serialize_call_request
from tableside.services.errors import ConflictError, NotFoundError, PersistenceFailure
from tableside.services.notifier import ConnectionManager, manager, CALL_NEW, CALL_COMPLETED
from tableside.services.tables import TableOccupancyTracker

logger = structlog.get_logger()

DUPLICATE_REQUEST = "Duplicate request already exists"


class CallRequestService:
    def __init__(self, db: AsyncSession, notifier: ConnectionManager = manager):
        self.db = db
        self.notifier = notifier

    @property
    def claims(self) -> ClaimCoordinator:
        return call_request_claims(self.db, self.notifier)

    async def get_call_request(self, request_id: UUID) -> CallRequest:
        result = await self.db.execute(
            select(CallRequest)
            .where(CallRequest.id == request_id)
            .execution_options(populate_existing=True)
        )
        request = result.scalar_one_or_none()
        if request is None:
            raise NotFoundError("Call request not found")
        return request

    async def list_call_requests(
        self,
        status: Optional[CallRequestStatus] = None,
        table_id: Optional[UUID] = None,
    ) -> List[CallRequest]:
        query = select(CallRequest)
        if status:
            query = query.where(CallRequest.status == CallRequestStatus(status).value)
        if table_id:
            query = query.where(CallRequest.table_id == table_id)
        query = query.order_by(CallRequest.created_at.asc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_call_request(self, data: CallRequestCreate) -> CallRequest:
        """Open a pending request unless the table already has one of this type"""
        await TableOccupancyTracker(self.db).get_table(data.table_id)

        existing = await self.db.execute(
            select(CallRequest.id).where(
                CallRequest.table_id == data.table_id,
                CallRequest.type == data.type.value,
                CallRequest.status == CallRequestStatus.PENDING.value,
            )
        )
        if existing.first() is not None:
            logger.info("Duplicate call request rejected", table_id=str(data.table_id), type=data.type.value)
            raise ConflictError(DUPLICATE_REQUEST)

        request = CallRequest(
            table_id=data.table_id,
            table_name=data.table_name,
            customer_name=data.customer_name,
            type=data.type.value,
            status=CallRequestStatus.PENDING.value,
        )
        self.db.add(request)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost the race against a concurrent request for the same (table, type)
            await self.db.rollback()
            raise ConflictError(DUPLICATE_REQUEST) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Create call request failed", table_id=str(data.table_id), error=str(e))
            raise PersistenceFailure("Failed to create call request") from e

        request = await self.get_call_request(request.id)
        logger.info(
            "Call request created",
            request_id=str(request.id),
            table_id=str(request.table_id),
            type=request.type,
        )
        await self.notifier.broadcast(CALL_NEW, serialize_call_request(request))
        return request

    async def complete_call_request(self, request_id: UUID, staff_id: UUID) -> CallRequest:
        """Close the request; claim fields are left as they are"""
        try:
            result = await self.db.execute(
                update(CallRequest)
                .where(CallRequest.id == request_id)
                .values(
                    status=CallRequestStatus.COMPLETED.value,
                    completed_at=datetime.utcnow(),
                    completed_by=staff_id,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise NotFoundError("Call request not found")
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Complete call request failed", request_id=str(request_id), error=str(e))
            raise PersistenceFailure("Failed to complete call request") from e

        request = await self.get_call_request(request_id)
        logger.info("Call request completed", request_id=str(request_id), staff_id=str(staff_id))
        await self.notifier.broadcast(CALL_COMPLETED, serialize_call_request(request))
        return request

    async def claim(self, request_id: UUID, staff_id: UUID) -> CallRequest:
        return await self.claims.claim(request_id, staff_id)

    async def release(self, request_id: UUID) -> CallRequest:
        return await self.claims.release(request_id)
