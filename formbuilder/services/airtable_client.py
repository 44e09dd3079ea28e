"""Airtable REST API client.

This module wraps the handful of Airtable endpoints the form builder uses:
schema discovery (bases, tables, fields) while authoring forms, and record
creation when a submission is accepted.
"""

from typing import Any, Dict, List, Optional

import httpx

from formbuilder.config import get_settings
from formbuilder.schemas.form import SUPPORTED_FIELD_TYPES
from formbuilder.logging_config import get_logger

logger = get_logger(__name__)


class AirtableError(Exception):
    """Raised when an Airtable request fails.

    Attributes:
        status_code: HTTP status returned by Airtable (None for transport errors)
        message: Error message extracted from the response
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(
            f"Airtable error ({status_code}): {message}" if status_code else f"Airtable error: {message}"
        )


class AirtableClient:
    """Client for the Airtable REST API.

    Usage:
        client = AirtableClient(access_token="pat...")
        fields = client.list_fields("appXXX", "tblXXX")
        record = client.create_record("appXXX", "tblXXX", {"fldName": "Alice"})
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.airtable.com/v0",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize client.

        Args:
            access_token: Bearer token for the Airtable API
            base_url: API root URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._client = httpx.Client(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            AirtableError: On transport failure or a non-2xx response
        """
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Airtable request {method} {path} failed: {e}")
            raise AirtableError(str(e)) from e

        if response.is_error:
            message = self._error_message(response)
            logger.error(
                f"Airtable {method} {path} returned {response.status_code}: {message}"
            )
            raise AirtableError(message, status_code=response.status_code)

        return response.json()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        # Airtable errors look like {"error": {"type": ..., "message": ...}} or {"error": "TYPE"}
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return error.get("message") or error.get("type") or response.reason_phrase
        if isinstance(error, str):
            return error
        return response.reason_phrase

    def list_bases(self) -> List[Dict[str, Any]]:
        """List bases the token can access."""
        return self._request("GET", "/meta/bases").get("bases", [])

    def list_tables(self, base_id: str) -> List[Dict[str, Any]]:
        """List tables (with their field schemas) in a base."""
        return self._request("GET", f"/meta/bases/{base_id}/tables").get("tables", [])

    def list_fields(self, base_id: str, table_id: str) -> List[Dict[str, Any]]:
        """List a table's fields that can back a form question.

        Unsupported field types are dropped. Select choices are flattened
        to their names.

        Args:
            base_id: Airtable base ID
            table_id: Airtable table ID or name

        Returns:
            List of ``{"id", "name", "type", "options"}`` dicts

        Raises:
            AirtableError: If the request fails or the table does not exist
        """
        tables = self.list_tables(base_id)
        table = next(
            (t for t in tables if t.get("id") == table_id or t.get("name") == table_id),
            None,
        )
        if table is None:
            raise AirtableError(f"Table {table_id} not found in base {base_id}", status_code=404)

        fields = []
        for field in table.get("fields", []):
            if field.get("type") not in SUPPORTED_FIELD_TYPES:
                continue
            choices = (field.get("options") or {}).get("choices") or []
            fields.append({
                "id": field.get("id"),
                "name": field.get("name"),
                "type": field.get("type"),
                "options": [choice.get("name") for choice in choices],
            })
        return fields

    def create_record(self, base_id: str, table_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create a single record.

        Args:
            base_id: Airtable base ID
            table_id: Airtable table ID
            fields: Field values keyed by Airtable field ID

        Returns:
            The created record (``{"id", "fields", "createdTime"}``)

        Raises:
            AirtableError: If the request fails or no record is returned
        """
        body = self._request(
            "POST",
            f"/{base_id}/{table_id}",
            json={"records": [{"fields": fields}]},
        )
        records = body.get("records") or []
        if not records:
            raise AirtableError("No record returned from create")
        record = records[0]
        logger.info(
            f"Created Airtable record {record.get('id')}",
            extra={"airtable_record_id": record.get("id")}
        )
        return record


def get_airtable_client():
    """FastAPI dependency yielding a client configured from settings.

    Yields:
        AirtableClient: Client closed after the request completes
    """
    settings = get_settings()
    client = AirtableClient(
        access_token=settings.airtable_access_token,
        base_url=settings.airtable_api_url,
        timeout=settings.airtable_timeout_seconds,
    )
    try:
        yield client
    finally:
        client.close()
