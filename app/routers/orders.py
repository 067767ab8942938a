from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.services.whatsapp_session import WhatsAppSession, get_whatsapp_session
from app.types import (
    DeliveryOutcome,
    DeliveryStatus,
    FormResponse,
    NotificationReport,
    NotificationStatus,
    OrderCompletion,
    ShopOrder,
)
from app.utils import normalize_phone_number
from app.utils.formatting import format_order_completion_message, format_order_message, utc_now_iso
from server.config import Settings, get_settings

logger = logging.getLogger("formrelay.orders")

router = APIRouter(prefix="/juiceBar", tags=["orders"])


async def _notify_customer(
    session: WhatsAppSession,
    settings: Settings,
    contact_number: Optional[str],
    text: str,
) -> NotificationReport:
    """Send `text` to the customer's number, when the order carries one."""
    if not contact_number:
        return NotificationReport(status=NotificationStatus.SKIPPED)
    try:
        number = normalize_phone_number(contact_number, settings.default_country_code)
    except ValueError as e:
        logger.warning(f"Invalid customer contact number {contact_number!r}: {e}")
        return NotificationReport(
            status=NotificationStatus.FAILED,
            deliveries=[
                DeliveryOutcome(recipient=contact_number, status=DeliveryStatus.FAILED, detail=str(e))
            ],
        )
    return await session.notify([number], text)


@router.post("/placeOrder")
async def place_order(
    order: ShopOrder,
    settings: Settings = Depends(get_settings),
    session: WhatsAppSession = Depends(get_whatsapp_session),
) -> FormResponse:
    timestamp = utc_now_iso()
    logger.info(
        "Juice Bar place order",
        extra={"order_id": order.order_id, "shop": order.shop_name, "items": len(order.items)},
    )

    report = await _notify_customer(
        session, settings, order.contact_number, format_order_message(order)
    )

    return FormResponse(
        message="Order placed successfully",
        timestamp=timestamp,
        data=order.model_dump(by_alias=True, exclude_none=True),
        notification=report,
    )


@router.post("/orderComplete")
async def order_complete(
    completion: OrderCompletion,
    settings: Settings = Depends(get_settings),
    session: WhatsAppSession = Depends(get_whatsapp_session),
) -> FormResponse:
    timestamp = utc_now_iso()
    logger.info(
        "Juice Bar order complete",
        extra={"order_id": completion.order_id, "shop": completion.shop_name},
    )

    report = await _notify_customer(
        session, settings, completion.contact_number, format_order_completion_message(completion)
    )

    return FormResponse(
        message="Order completion recorded successfully",
        timestamp=timestamp,
        data=completion.model_dump(by_alias=True, exclude_none=True),
        notification=report,
    )
