"""
HTTP client for the tracking API.

Wraps GET/POST/PUT/DELETE /api/tracking. Every request carries the admin
token; the client never inspects it, the server decides whether it is valid.

Any failure (connection error, non-2xx status, unreadable body) raises
TrackingAPIError with a message fit for the operator: the server's "error"
field when it sent one, a generic Portuguese message otherwise.
"""

import logging
from typing import Any, Optional

import httpx

from shared.errors import TrackingAPIError
from shared.models import TrackingRecord

logger = logging.getLogger("tracking_client")

TRACKING_PATH = "/api/tracking"


class TrackingClient:
    """
    Tracking API client.

    Example:
        client = TrackingClient("http://127.0.0.1:8000", token)
        tracking = client.create(order_number="DC123", customer_name="Ana",
                                 destination_city="Canoas")
        client.update(tracking.id, "in_transit", "Objeto em trânsito")
    """

    def __init__(
        self,
        base_url: str,
        admin_token: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Server root, e.g. "http://127.0.0.1:8000"
            admin_token: Token sent as X-Admin-Token and Authorization: Bearer
            timeout: Seconds before a request is abandoned
            client: Preconfigured httpx client (for tests); base_url and
                   timeout are not applied to it
        """
        self.admin_token = admin_token
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TrackingClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        if not self.admin_token:
            return {}
        return {
            "X-Admin-Token": self.admin_token,
            "Authorization": f"Bearer {self.admin_token}",
        }

    def _request(self, method: str, fallback_error: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._client.request(method, TRACKING_PATH, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"[TRACKING] {method} failed: {e}")
            raise TrackingAPIError(f"{fallback_error}: falha de conexão") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            message = fallback_error
            if isinstance(body, dict):
                message = body.get("error") or body.get("detail") or fallback_error
            logger.error(f"[TRACKING] {method} -> {response.status_code}: {message}")
            raise TrackingAPIError(str(message), status_code=response.status_code)

        if not isinstance(body, dict):
            raise TrackingAPIError(f"{fallback_error}: resposta inválida", status_code=response.status_code)
        return body

    # =========================================================================
    # Operations
    # =========================================================================

    def list_all(self) -> list[TrackingRecord]:
        """All tracking records, newest first (admin only)."""
        body = self._request("GET", "Erro ao carregar rastreios", params={"all": "true"})
        return [TrackingRecord.model_validate(t) for t in body.get("trackings", [])]

    def list_by_customer(self, customer_email: str) -> list[TrackingRecord]:
        """Tracking records of one customer."""
        body = self._request("GET", "Erro ao carregar rastreios", params={"customer_email": customer_email})
        return [TrackingRecord.model_validate(t) for t in body.get("trackings", [])]

    def find(self, code: str) -> TrackingRecord:
        """Look up by tracking code or order number."""
        body = self._request("GET", "Rastreio não encontrado", params={"code": code})
        return TrackingRecord.model_validate(body["tracking"])

    def create(
        self,
        order_number: str,
        customer_name: str,
        destination_city: str,
        **fields: Any,
    ) -> TrackingRecord:
        """Create a record; the server generates its tracking code."""
        payload = {
            "order_number": order_number,
            "customer_name": customer_name,
            "destination_city": destination_city,
            **fields,
        }
        body = self._request("POST", "Erro ao criar rastreio", json=payload)
        tracking = TrackingRecord.model_validate(body["tracking"])
        logger.info(f"[TRACKING] Created {tracking.tracking_code}")
        return tracking

    def update(
        self,
        tracking_id: str,
        new_status: Optional[str] = None,
        description: Optional[str] = None,
        location: Optional[str] = None,
        details: Optional[str] = None,
        **destination: Optional[str],
    ) -> TrackingRecord:
        """
        Append a timeline entry and/or correct the destination.

        The server only appends an entry when both new_status and
        description are given.
        """
        payload: dict[str, Any] = {
            "id": tracking_id,
            "new_status": new_status,
            "status_description": description,
            "status_location": location,
            "status_details": details,
            **destination,
        }
        payload = {k: v for k, v in payload.items() if v is not None}
        body = self._request("PUT", "Erro ao atualizar rastreio", json=payload)
        return TrackingRecord.model_validate(body["tracking"])

    def delete(self, tracking_id: str) -> None:
        """Remove a record."""
        self._request("DELETE", "Erro ao deletar", params={"id": tracking_id})
        logger.info(f"[TRACKING] Deleted {tracking_id}")
