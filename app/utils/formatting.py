"""WhatsApp message templates for relayed submissions.

Templates use WhatsApp markdown (`*bold*`). They only render text; sending is
the dispatcher's job.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from app.types import ContactFormSubmission, LeadSubmission, OrderCompletion, ShopOrder

NOT_PROVIDED = "Not provided"
NOT_SPECIFIED = "Not specified"

_ITEM_NAME_LIMIT = 15


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def format_timestamp(timestamp: Optional[str]) -> str:
    """Render an ISO timestamp as `January 5, 2025 at 03:04 PM`.

    A missing timestamp falls back to the current UTC time in ISO form and an
    unparseable one is returned verbatim.
    """
    if not timestamp:
        return utc_now_iso()
    parsed = _parse_timestamp(timestamp)
    if parsed is None:
        return timestamp
    return f"{parsed:%B} {parsed.day}, {parsed.year} at {parsed:%I:%M %p}"


def format_date(value: Optional[str]) -> str:
    """Render a date as `January 5, 2025`, defaulting to today (UTC)."""
    parsed = _parse_timestamp(value) if value else None
    if parsed is None:
        parsed = datetime.now(timezone.utc)
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def _or(value: Any, default: str) -> Any:
    if value is None or value == "":
        return default
    return value


def _yes_no(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return _or(value, "No")


def format_contact_form_message(form: ContactFormSubmission) -> str:
    message = "*📋 New Tour Inquiry*\n\n"
    message += f"📅 *Date:* {format_timestamp(form.timestamp)}\n"
    message += f"👤 *Name:* {_or(form.name, NOT_PROVIDED)}\n"
    message += f"📧 *Email:* {_or(form.email, NOT_PROVIDED)}\n"
    message += f"📱 *Phone:* {_or(form.phone, NOT_PROVIDED)}\n"
    message += f"🌍 *Country:* {_or(form.country, NOT_PROVIDED)}\n"
    message += f"📌 *Subject:* {_or(form.subject, NOT_PROVIDED)}\n"
    if form.message:
        message += f"💬 *Message:* {form.message}\n"
    message += f"✈️ *Travel Start:* {_or(form.travel_start, NOT_SPECIFIED)}\n"
    message += f"✈️ *Travel End:* {_or(form.travel_end, NOT_SPECIFIED)}\n"
    message += f"👥 *Number of Travelers:* {_or(form.travelers, NOT_SPECIFIED)}\n"
    message += f"📰 *Newsletter Subscription:* {_yes_no(form.newsletter)}\n"
    message += f"📊 *Status:* {_or(form.status, 'new')}\n"
    if form.ip_address:
        message += f"🌐 *IP Address:* {form.ip_address}\n"
    if form.user_agent:
        message += f"🖥️ *User Agent:* {form.user_agent}\n"
    return message


def format_lead_message(lead: LeadSubmission) -> str:
    message = "*🎯 New Lead from Landing Page*\n\n"
    message += f"📅 *Date:* {format_timestamp(lead.timestamp)}\n"
    message += f"👤 *Name:* {_or(lead.name, NOT_PROVIDED)}\n"
    message += f"📧 *Email:* {_or(lead.email, NOT_PROVIDED)}\n"
    message += f"📱 *Phone:* {_or(lead.phone, NOT_PROVIDED)}\n"
    if lead.source:
        message += f"🔗 *Source:* {lead.source}\n"
    if lead.interest:
        message += f"💡 *Interest:* {lead.interest}\n"
    if lead.message:
        message += f"💬 *Message:* {lead.message}\n"
    if lead.ip_address:
        message += f"🌐 *IP Address:* {lead.ip_address}\n"
    if lead.user_agent:
        message += f"🖥️ *User Agent:* {lead.user_agent}\n"
    return message


def format_order_message(order: ShopOrder) -> str:
    """Render the customer confirmation for a placed order as a boxed item table."""
    message = f"*{order.shop_name}*\n\n"
    message += "📋 *Order Details*\n"
    message += f"Order ID: {order.order_id}\n\n"

    message += "🛒 *Items Ordered:*\n"
    message += "┌─────────────────────────────────┐\n"
    for index, item in enumerate(order.items, start=1):
        name = item.name
        if len(name) > _ITEM_NAME_LIMIT:
            name = name[:_ITEM_NAME_LIMIT] + "..."
        quantity = f"x{item.quantity}"
        price = f"Rs.{item.price}"
        message += f"│ Item-{index:02d} │ {name.ljust(18)} │ {quantity.ljust(3)} │ {price.ljust(8)} │\n"
    message += "└─────────────────────────────────┘\n\n"

    message += f"💰 *Total Amount: Rs.{order.total_price}*\n\n"
    message += "Thank you for your order! 🙏 Will inform you through whatsapp when order is ready."
    return message


def format_order_completion_message(completion: OrderCompletion) -> str:
    message = (
        f"Order from *{completion.shop_name}* on {format_date(completion.order_date)} is ready now.\n\n"
    )
    message += "Come to shop and collect the order.\n\n"
    if completion.payment_status == "unpaid":
        message += f"💰 Please pay the bill Rs.{completion.payment_amount} when collecting your order."
    else:
        message += "✅ Payment has been completed."
    return message


def format_direct_message(text: str, shop_name: Optional[str] = None) -> str:
    if shop_name:
        return f"*{shop_name}*\n\n{text}"
    return text
