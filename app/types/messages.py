from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _stringify(v: Any) -> Any:
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class FormSubmission(BaseModel):
    """Base class for website form payloads relayed to WhatsApp.

    Browsers post whatever fields the page collects, so unknown keys are kept
    and echoed back rather than rejected. Fields shared by every form live
    here; subclasses add the form-specific ones.

    Anatomy:
    - timestamp: client-side submission time (ISO 8601), optional
    - ip_address / user_agent: client metadata some pages forward
    - recaptcha_token: token checked by the CAPTCHA gate when enabled
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    timestamp: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    recaptcha_token: Optional[str] = None

    @field_validator("phone", mode="before")
    @classmethod
    def _coerce_phone(cls, v: Any) -> Any:
        return _stringify(v)

    def public_data(self) -> dict[str, Any]:
        """Return the submission for echoing back, without the CAPTCHA token."""
        return self.model_dump(exclude={"recaptcha_token"}, exclude_none=True)

    def token_hint(self) -> Optional[str]:
        if not self.recaptcha_token:
            return None
        return self.recaptcha_token[:20] + "..."


class ContactFormSubmission(FormSubmission):
    """Tour inquiry posted by the DM Tours contact form.

    Example:
        >>> from app.types import ContactFormSubmission
        >>> ContactFormSubmission(name="Ann", email="ann@example.com", travelers=2)
    """

    country: Optional[str] = None
    subject: Optional[str] = None
    travel_start: Optional[str] = None
    travel_end: Optional[str] = None
    travelers: Optional[Union[int, str]] = None
    newsletter: Optional[Union[bool, str]] = None
    status: Optional[str] = None


class LeadSubmission(FormSubmission):
    """Lead collected by a landing page. Name and email are checked by the router."""

    source: Optional[str] = None
    interest: Optional[str] = None


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    quantity: Union[int, str] = 1
    price: Union[int, float, str] = 0


class ShopOrder(BaseModel):
    """Order placed at a juice bar, optionally confirmed to the customer.

    JSON keys are camelCase (`shopName`, `contactNumber`, ...) as sent by the
    shop front end; snake_case names are accepted too.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    order_id: Optional[Union[str, int]] = Field(default=None, alias="orderId")
    shop_name: Optional[str] = Field(default=None, alias="shopName")
    items: List[OrderItem] = Field(default_factory=list)
    total_price: Optional[Union[int, float, str]] = Field(default=None, alias="totalPrice")
    contact_number: Optional[str] = Field(default=None, alias="contactNumber")

    @field_validator("contact_number", mode="before")
    @classmethod
    def _coerce_contact_number(cls, v: Any) -> Any:
        return _stringify(v)


class OrderCompletion(BaseModel):
    """Notice that an order is ready for collection."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    order_id: Optional[Union[str, int]] = Field(default=None, alias="orderId")
    shop_name: Optional[str] = Field(default=None, alias="shopName")
    contact_number: Optional[str] = Field(default=None, alias="contactNumber")
    order_date: Optional[str] = Field(default=None, alias="orderDate")
    payment_status: Optional[str] = Field(default=None, alias="paymentStatus")
    payment_amount: Optional[Union[int, float, str]] = Field(default=None, alias="paymentAmount")

    @field_validator("contact_number", mode="before")
    @classmethod
    def _coerce_contact_number(cls, v: Any) -> Any:
        return _stringify(v)


class DirectMessageRequest(BaseModel):
    """Free-form message to a single number, optionally branded with a shop name."""

    model_config = ConfigDict(populate_by_name=True)

    contact_number: Optional[str] = Field(default=None, alias="contactNumber")
    message: Optional[str] = None
    shop_name: Optional[str] = Field(default=None, alias="shopName")

    @field_validator("contact_number", mode="before")
    @classmethod
    def _coerce_contact_number(cls, v: Any) -> Any:
        return _stringify(v)
