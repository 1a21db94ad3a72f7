# ==============================================================================
# ORDER SERVICE - Order Queries & Fulfilment
# ==============================================================================
# Listing, access control and the status transition table
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.constants import DatabaseConstants as DC, ErrorMessages, OrderConstants
from storefront.core.exceptions import (
    AppException,
    AuthorizationError,
    BusinessRuleError,
    NotFoundError,
)
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.database.unit_of_work.uow import UnitOfWork
from storefront.domain_models.order import Order, OrderStatus, PaymentStatus
from storefront.schemas.order import (
    BulkStatusFailure,
    BulkStatusResult,
    OrderResponse,
    OrderStatusUpdate,
    OrderTracking,
)
from storefront.utils.helpers import calculate_offset, paginate_results, utc_now

logger = logging.getLogger(__name__)


def _status_value(status: Any) -> str:
    return status.value if isinstance(status, OrderStatus) else str(status)


def check_transition(current: Any, target: Any) -> bool:
    """
    Validate a status change against the transition table.

    Returns:
        False when ``target`` equals ``current`` (nothing to do),
        True when the change is allowed

    Raises:
        BusinessRuleError: The change is not in the table
    """
    current, target = _status_value(current), _status_value(target)
    if current == target:
        return False
    allowed = OrderConstants.STATUS_TRANSITIONS.get(current, frozenset())
    if target not in allowed:
        raise BusinessRuleError(
            message=f"Cannot change order status from {current} to {target}",
            rule="order_status_transition",
            details={"from": current, "to": target, "allowed": sorted(allowed)},
        )
    return True


class OrderService:
    """
    Order reads and admin status management.

    Customers only see their own orders; admins see all of them.
    Status changes follow ``OrderConstants.STATUS_TRANSITIONS`` and
    each change runs in its own ``UnitOfWork`` with the row locked.
    """

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        self._adapter = adapter

    # ==========================================================================
    # READ
    # ==========================================================================

    async def list_orders(
        self,
        user_id: str,
        is_admin: bool = False,
        page: int = 1,
        page_size: int = 20,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        conditions: List[Any] = []
        if not is_admin:
            conditions.append(Order.user_id == user_id)
        if status:
            conditions.append(Order.status == OrderStatus(status))
        if payment_status:
            conditions.append(Order.payment_status == PaymentStatus(payment_status))
        if search:
            conditions.append(func.lower(Order.order_number).like(f"%{search.lower()}%"))

        async with self._adapter.session() as session:
            count_query = select(func.count(Order.id))
            query = select(Order).order_by(Order.created_at.desc(), Order.id)
            if conditions:
                count_query = count_query.where(and_(*conditions))
                query = query.where(and_(*conditions))

            total = await session.scalar(count_query) or 0
            result = await session.execute(
                query.offset(calculate_offset(page, page_size)).limit(page_size)
            )
            items = [OrderResponse.model_validate(o) for o in result.scalars().all()]

        return paginate_results(items, page, page_size, total)

    async def _load(self, order_id: str) -> Order:
        async with self._adapter.session() as session:
            order = await session.get(Order, order_id)
            if order is None:
                raise NotFoundError(
                    message=ErrorMessages.ORDER_NOT_FOUND,
                    resource_type="order",
                    resource_id=order_id,
                )
            return order

    @staticmethod
    def _authorize(order: Order, user_id: str, is_admin: bool) -> None:
        if not is_admin and order.user_id != user_id:
            raise AuthorizationError(message=ErrorMessages.ORDER_FORBIDDEN)

    async def get_order(self, order_id: str, user_id: str, is_admin: bool = False) -> OrderResponse:
        """
        Fetch an order for its owner or an admin.

        Raises:
            NotFoundError: Unknown order
            AuthorizationError: Caller is neither owner nor admin
        """
        order = await self._load(order_id)
        self._authorize(order, user_id, is_admin)
        return OrderResponse.model_validate(order)

    async def tracking(self, order_id: str, user_id: str, is_admin: bool = False) -> OrderTracking:
        order = await self._load(order_id)
        self._authorize(order, user_id, is_admin)
        return OrderTracking.model_validate(order)

    # ==========================================================================
    # STATUS
    # ==========================================================================

    async def update_status(self, order_id: str, schema: OrderStatusUpdate) -> OrderResponse:
        """
        Move an order to a new status.

        Re-applying the current status is a no-op apart from
        ``tracking_number``/``notes``. ``shipped`` stamps ``shipped_at``;
        ``delivered`` stamps ``delivered_at``.

        Raises:
            NotFoundError: Unknown order
            BusinessRuleError: Transition not allowed
        """
        async with UnitOfWork(self._adapter) as uow:
            order = await uow.orders.get_with_items(order_id, for_update=True)
            if order is None:
                raise NotFoundError(
                    message=ErrorMessages.ORDER_NOT_FOUND,
                    resource_type="order",
                    resource_id=order_id,
                )

            previous = _status_value(order.status)
            if check_transition(order.status, schema.status):
                target = OrderStatus(schema.status)
                order.status = target
                if target == OrderStatus.SHIPPED:
                    order.shipped_at = utc_now()
                elif target == OrderStatus.DELIVERED:
                    order.delivered_at = utc_now()
                logger.info(f"Order {order.order_number}: {previous} -> {target.value}")

            if schema.tracking_number:
                order.tracking_number = schema.tracking_number
            if schema.notes:
                order.notes = f"{order.notes}\n\n{schema.notes}" if order.notes else schema.notes

            await uow.commit()
            return OrderResponse.model_validate(order)

    async def bulk_update_status(self, order_ids: List[str], status: str) -> BulkStatusResult:
        """Apply one status to many orders; failures are reported per order."""
        result = BulkStatusResult()
        for order_id in order_ids:
            try:
                await self.update_status(order_id, OrderStatusUpdate(status=status))
            except (AppException, SQLAlchemyError) as e:
                reason = e.message if isinstance(e, AppException) else str(e)
                result.failed.append(BulkStatusFailure(order_id=order_id, reason=reason))
            else:
                result.updated.append(order_id)

        logger.info(
            f"Bulk status {status}: {len(result.updated)} updated, {len(result.failed)} failed"
        )
        return result

    async def bulk_delete(self, order_ids: List[str]) -> int:
        """Hard-delete orders; their line items go with them."""
        deleted = await self._adapter.bulk_delete(DC.ORDERS_COLLECTION, {"id": order_ids})
        logger.info(f"Deleted {deleted} order(s)")
        return deleted
