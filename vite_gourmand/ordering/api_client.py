"""
HTTP client for the Vite & Gourmand API.

Wraps the four endpoints the ordering workflow depends on:

- GET /api/menus (+ /api/menus/{id}): catalog for menu selection
- POST /api/ai-agent/chat: custom menu assistant
- POST /api/contact: custom menu brief as a support ticket
- POST /api/orders: catalog order or custom quote (bearer token)

Responses arrive in the standard envelope
``{"success", "statusCode", "message", "data", ...}``; the client returns
``data``. Failures are mapped to the ordering errors:

- connection errors and timeouts -> NetworkError
- 401 -> Unauthenticated
- any other non-2xx, or a 2xx without a JSON body -> ServerRejection
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from .. import config
from .draft import MenuSummary
from .errors import NetworkError, ServerRejection, Unauthenticated

logger = logging.getLogger(__name__)

INVALID_RESPONSE_MESSAGE = "Invalid response from server"


class CateringApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session_store=None,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.session_store = session_store
        self.timeout = timeout if timeout is not None else config.API_TIMEOUT
        self.http = http or requests.Session()

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    def _headers(self, auth: bool) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if auth and self.session_store is not None:
            token = self.session_store.get_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        auth: bool = False,
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self.http.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(auth),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkError(str(e)) from e

        body = self._decode(response)

        if response.status_code == 401:
            raise Unauthenticated(self._error_message(body, response))
        if not response.ok:
            message = self._error_message(body, response)
            logger.info("%s %s rejected with %d: %s", method, url, response.status_code, message)
            raise ServerRejection(response.status_code, message)
        if body is None:
            logger.warning("%s %s returned %d without a JSON body", method, url, response.status_code)
            raise ServerRejection(response.status_code, INVALID_RESPONSE_MESSAGE)

        return unwrap(body)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _error_message(body: Any, response: requests.Response) -> str:
        if isinstance(body, dict):
            message = body.get("message") or body.get("detail")
            if message:
                return str(message)
        return response.reason or f"HTTP {response.status_code}"

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    def list_menus(
        self,
        page: int = 1,
        limit: int = 50,
        status: Optional[str] = None,
        diet_id: Optional[int] = None,
        theme_id: Optional[int] = None,
    ) -> Tuple[List[MenuSummary], Dict[str, Any]]:
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        if diet_id is not None:
            params["dietId"] = diet_id
        if theme_id is not None:
            params["themeId"] = theme_id

        data = self._request("GET", "/api/menus", params=params) or {}
        if isinstance(data, list):
            items, meta = data, {}
        else:
            items, meta = data.get("items", []), data.get("meta", {})
        return [MenuSummary.from_api(m) for m in items], meta

    def get_menu(self, menu_id: int) -> MenuSummary:
        return MenuSummary.from_api(self._request("GET", f"/api/menus/{menu_id}"))

    def send_chat_message(self, message: str, conversation_id: Optional[str] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": message}
        if conversation_id:
            payload["conversationId"] = conversation_id
        return self._request("POST", "/api/ai-agent/chat", json=payload) or {}

    def create_contact_ticket(
        self,
        name: str,
        email: str,
        title: str,
        description: str,
        phone: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = {"name": name, "email": email, "title": title, "description": description}
        if phone:
            payload["phone"] = phone
        return self._request("POST", "/api/contact", json=payload)

    def create_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/orders", json=payload, auth=True)


def unwrap(body: Any) -> Any:
    """Return the ``data`` of an enveloped response, or the body unchanged."""
    if isinstance(body, dict) and "success" in body and "data" in body:
        return body["data"]
    return body
