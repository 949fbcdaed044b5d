"""Customer visit and spend aggregation"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.models.customer import Customer
from tableside.services.errors import PersistenceFailure

logger = structlog.get_logger()


class CustomerSpendAggregator:
    """Rolling per-customer totals keyed by email"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str, refresh: bool = False) -> Optional[Customer]:
        query = select(Customer).where(Customer.email == email)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def record_spend(self, email: Optional[str], amount_cents: int) -> None:
        """Add a completed order's total to the customer's spend.

        Never raises: a failed aggregate update is logged and must not undo
        the order completion it follows.
        """
        if not email:
            return

        try:
            result = await self.db.execute(
                update(Customer)
                .where(Customer.email == email)
                .values(total_spent_cents=Customer.total_spent_cents + amount_cents)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Update customer spending failed", email=email, error=str(e))
            return

        if result.rowcount:
            logger.info("Customer spend recorded", email=email, amount_cents=amount_cents)

    async def record_visit(self, email: str, email_consent: Optional[bool] = None) -> Customer:
        """Create the customer or bump their visit count"""
        now = datetime.utcnow()
        try:
            customer = await self.get_by_email(email)
            if customer is None:
                customer = Customer(
                    email=email,
                    email_consent=bool(email_consent),
                    visit_count=1,
                    total_spent_cents=0,
                    last_visit_at=now,
                )
                self.db.add(customer)
                try:
                    await self.db.commit()
                except IntegrityError:
                    # Registered concurrently; count this as a repeat visit
                    await self.db.rollback()
                    return await self._bump_visit(email, email_consent, now)
            else:
                return await self._bump_visit(email, email_consent, now)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Create/update customer failed", email=email, error=str(e))
            raise PersistenceFailure("Failed to create/update customer") from e

        logger.info("Customer registered", email=email)
        return await self.get_by_email(email, refresh=True)

    async def _bump_visit(self, email: str, email_consent: Optional[bool], now: datetime) -> Customer:
        values = {"visit_count": Customer.visit_count + 1, "last_visit_at": now}
        if email_consent is not None:
            values["email_consent"] = email_consent
        await self.db.execute(
            update(Customer)
            .where(Customer.email == email)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        customer = await self.get_by_email(email, refresh=True)
        logger.info("Customer visit recorded", email=email, visit_count=customer.visit_count)
        return customer
