"""Pydantic schemas for Airtable record-change webhooks.

The webhook relay forwards Airtable automation payloads to us unchanged,
adding the shared secret as a header. Direct callers may instead put the
secret in the body as ``webhookSecret``.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

RECORD_UPDATED = "record.updated"
RECORD_DELETED = "record.deleted"


class AirtableRecordRef(BaseModel):
    """Reference to the Airtable record an event is about.

    Only ``id`` is used; any other record fields are accepted and ignored.
    """
    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, description="Airtable record ID")


class AirtableWebhookRequest(BaseModel):
    """Airtable record-change webhook payload.

    Attributes:
        eventType: ``record.updated``, ``record.deleted`` or another event name
        base: Optional base descriptor sent by Airtable
        table: Optional table descriptor sent by Airtable
        record: The record the event refers to
        webhookSecret: Shared secret, for callers that cannot set headers

    Example:
        {
            "eventType": "record.deleted",
            "base": {"id": "appXXXXXXXXXXXXXX"},
            "table": {"id": "tblXXXXXXXXXXXXXX"},
            "record": {"id": "recXXXXXXXXXXXXXX"}
        }
    """
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    eventType: str = Field(..., min_length=1, description="Webhook event type")
    base: Optional[dict[str, Any]] = Field(default=None, description="Base descriptor")
    table: Optional[dict[str, Any]] = Field(default=None, description="Table descriptor")
    record: AirtableRecordRef = Field(..., description="Affected record")
    webhookSecret: Optional[str] = Field(default=None, description="Shared secret")

    @field_validator("eventType")
    @classmethod
    def event_type_lowercase(cls, v: str) -> str:
        """Event names are compared case-insensitively."""
        return v.lower()

    @property
    def is_update(self) -> bool:
        """Check if the event reports a changed record."""
        return self.eventType == RECORD_UPDATED

    @property
    def is_delete(self) -> bool:
        """Check if the event reports a deleted record."""
        return self.eventType == RECORD_DELETED
