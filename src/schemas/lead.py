"""Contact form lead schema."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

ContactPreference = Literal["whatsapp", "email", "phone", "any"]
Urgency = Literal["low", "medium", "high", "urgent"]


class Lead(BaseModel):
    """A service request submitted through the contact form.

    Serialized with model_dump(mode="json") and inserted into the leads
    collection of the Content Store.
    """

    name: str
    email: str
    phone: str
    service: str = ""
    message: str
    budget_min: int | None = None
    budget_max: int | None = None
    deadline: str | None = None
    contact_preference: ContactPreference = "any"
    urgency: Urgency = "medium"
    status: str = "new"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
