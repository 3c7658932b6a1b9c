"""
Client-side storage for the ordering workflow.

Two small stores back the account-gated submission:

- **Session store**: holds the customer's bearer token. Its presence is the
  client-side "is signed in" check; the API still validates the token.
- **Pending draft store**: keeps the wizard fields while the customer signs
  in, so the draft can be restored afterwards.

Each comes in a memory flavour (tests, single process) and a JSON file
flavour (survives a restart of the client).

Pending Draft Format:
---------------------
    {
        "menuId": 3,
        "deliveryDate": "2026-06-15",
        "deliveryHour": "12:00",
        "deliveryAddress": "12 rue Sainte-Catherine",
        "deliveryCity": "Bordeaux",
        "personCount": 12,
        "custom": false,
        "customDescription": "",
        "specialInstructions": ""
    }
"""

import json
import logging
import os
from datetime import date
from typing import Any, Dict, Optional

from .draft import OrderDraft

logger = logging.getLogger(__name__)


# =============================================================================
# Draft Serialization
# =============================================================================

def serialize_draft(draft: OrderDraft) -> Dict[str, Any]:
    return {
        "menuId": draft.menu.id if draft.menu is not None else None,
        "deliveryDate": draft.delivery_date.isoformat() if draft.delivery_date else None,
        "deliveryHour": draft.delivery_hour,
        "deliveryAddress": draft.delivery_address,
        "deliveryCity": draft.delivery_city,
        "personCount": draft.person_count,
        "custom": draft.custom,
        "customDescription": draft.custom_description,
        "specialInstructions": draft.special_instructions,
    }


def parse_delivery_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning("Ignoring invalid saved delivery date %r", value)
        return None


# =============================================================================
# Session Stores
# =============================================================================

class MemorySessionStore:
    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None

    def is_authenticated(self) -> bool:
        return bool(self._token)


def _read_json(path: str) -> Optional[Dict[str, Any]]:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None


def _write_json(path: str, data: Dict[str, Any]) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def _remove(path: str) -> None:
    if os.path.exists(path):
        os.remove(path)


class FileSessionStore:
    """Bearer token kept in a small JSON file (``{"token": "..."}``)."""

    def __init__(self, path: str):
        self.path = path

    def get_token(self) -> Optional[str]:
        data = _read_json(self.path)
        return data.get("token") if data else None

    def set_token(self, token: str) -> None:
        _write_json(self.path, {"token": token})

    def clear(self) -> None:
        _remove(self.path)

    def is_authenticated(self) -> bool:
        return bool(self.get_token())


# =============================================================================
# Pending Draft Stores
# =============================================================================

class MemoryDraftStore:
    def __init__(self):
        self._data: Optional[Dict[str, Any]] = None

    def save(self, data: Dict[str, Any]) -> None:
        self._data = dict(data)

    def load(self) -> Optional[Dict[str, Any]]:
        return dict(self._data) if self._data is not None else None

    def clear(self) -> None:
        self._data = None


class FileDraftStore:
    def __init__(self, path: str):
        self.path = path

    def save(self, data: Dict[str, Any]) -> None:
        _write_json(self.path, data)
        logger.debug("Pending draft saved to %s", self.path)

    def load(self) -> Optional[Dict[str, Any]]:
        return _read_json(self.path)

    def clear(self) -> None:
        _remove(self.path)
