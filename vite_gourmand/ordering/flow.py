"""
Order Wizard Controller
=======================

:class:`OrderFlowController` drives the four-step order wizard on top of the
immutable :class:`~vite_gourmand.ordering.draft.OrderDraft`.

Navigation:
-----------
- ``next()`` moves forward only when the current step's guard holds and
  raises :class:`ValidationError` otherwise. No request is sent.
- ``back()`` / ``go_to()`` return to any earlier step. Jumping forward is
  allowed only when every step in between is valid.

Submission:
-----------
``submit()`` is gated on a session:

1. Without a stored token the order endpoint is never called. The draft is
   written to the pending draft store and the result carries the sign-in
   redirect (``/portal?redirect=/order``).
2. A 401 from the API (expired token) is handled the same way.
3. Network failures and API rejections become an error notification and
   the draft is kept for a manual retry.
4. On success the order number is returned, the draft is reset and the
   pending draft store is cleared.

Only one submission can be outstanding at a time.

After signing in, ``restore_pending()`` rebuilds the draft from the pending
store.

Usage:
------
    controller = OrderFlowController(api, session_store, draft_store)
    controller.load_menus()
    controller.update(select_menu, controller.menus[0])
    controller.next()
    ...
    result = controller.submit()
    if result.redirect_url:
        redirect(result.redirect_url)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .. import config
from .api_client import CateringApiClient
from .draft import (
    STEP_ERRORS,
    MenuSummary,
    OrderDraft,
    Step,
    choose_custom,
    is_step_valid,
    select_menu,
    set_delivery,
    set_instructions,
    set_person_count,
)
from .errors import NetworkError, ServerRejection, Unauthenticated, ValidationError
from .pricing import estimate
from .storage import parse_delivery_date, serialize_draft

logger = logging.getLogger(__name__)

SUBMIT_ERROR_MESSAGE = "Erreur lors de l'envoi de la commande. Veuillez réessayer."
SUBMIT_SUCCESS_MESSAGE = "Commande {reference} enregistrée !"

FORM_STEPS = (Step.MENU_SELECTION, Step.DELIVERY, Step.DETAILS)


@dataclass(frozen=True)
class Notification:
    level: str  # "success", "error" or "info"
    message: str


@dataclass(frozen=True)
class SubmissionResult:
    success: bool
    reference: Optional[str] = None
    redirect_url: Optional[str] = None


class OrderFlowController:
    def __init__(
        self,
        api: CateringApiClient,
        session_store,
        draft_store,
        auth_entry_url: Optional[str] = None,
    ):
        self.api = api
        self.session_store = session_store
        self.draft_store = draft_store
        self.auth_entry_url = auth_entry_url or config.AUTH_ENTRY_URL

        self.step = Step.MENU_SELECTION
        self.draft = OrderDraft()
        self.menus: List[MenuSummary] = []
        self.notifications: List[Notification] = []
        self.last_reference: Optional[str] = None
        self._submitting = False

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level, message))

    def dismiss(self, notification: Notification) -> None:
        if notification in self.notifications:
            self.notifications.remove(notification)

    def dismiss_all(self) -> None:
        self.notifications.clear()

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def load_menus(self, preselect_id: Optional[int] = None, **filters: Any) -> List[MenuSummary]:
        """Fetch the catalog; optionally select the menu with ``preselect_id``."""
        try:
            menus, _meta = self.api.list_menus(**filters)
        except (NetworkError, ServerRejection) as e:
            logger.warning("Menu catalog unavailable: %s", e)
            self.notify("error", "Impossible de charger les menus. Veuillez réessayer.")
            return self.menus

        self.menus = menus
        if preselect_id is not None:
            menu = self.find_menu(preselect_id)
            if menu is not None:
                self.draft = select_menu(self.draft, menu)
        return menus

    def find_menu(self, menu_id: int) -> Optional[MenuSummary]:
        for menu in self.menus:
            if menu.id == menu_id:
                return menu
        return None

    # -------------------------------------------------------------------------
    # Draft & navigation
    # -------------------------------------------------------------------------

    def update(self, transition: Callable[..., OrderDraft], *args: Any, **kwargs: Any) -> OrderDraft:
        """Apply a draft transition such as ``select_menu`` or ``set_delivery``."""
        self.draft = transition(self.draft, *args, **kwargs)
        return self.draft

    def can_advance(self) -> bool:
        return is_step_valid(self.step, self.draft)

    def _check(self, step: Step) -> None:
        if not is_step_valid(step, self.draft):
            raise ValidationError(STEP_ERRORS.get(step, "Étape invalide."), step=step.name)

    def next(self) -> Step:
        following = self.step.following
        if following is None:
            return self.step
        self._check(self.step)
        self.step = following
        return self.step

    def back(self, step: Optional[Step] = None) -> Step:
        target = step or self.step.previous
        if target is None:
            return self.step
        if target.value > self.step.value:
            raise ValueError(f"{target.name} is not before {self.step.name}")
        self.step = target
        return self.step

    def go_to(self, step: Step) -> Step:
        if step.value <= self.step.value:
            return self.back(step)
        for intermediate in Step:
            if self.step.value <= intermediate.value < step.value:
                self._check(intermediate)
        self.step = step
        return self.step

    def reset(self) -> None:
        self.step = Step.MENU_SELECTION
        self.draft = OrderDraft()

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    def build_order_payload(self) -> Dict[str, Any]:
        draft = self.draft
        payload: Dict[str, Any] = {
            "deliveryDate": draft.delivery_date.isoformat() if draft.delivery_date else None,
            "deliveryHour": draft.delivery_hour,
            "deliveryAddress": f"{draft.delivery_address.strip()}, {draft.delivery_city.strip()}",
            "personNumber": draft.person_count,
        }
        instructions = draft.special_instructions.strip()

        if draft.custom or draft.menu is None:
            request_text = draft.custom_description.strip()
            if instructions:
                request_text = f"{request_text}\n\n{instructions}"
            payload.update(menuPrice=0, totalPrice=0, specialInstructions=request_text)
        else:
            payload.update(
                menuId=draft.menu.id,
                menuPrice=draft.menu.price_per_person,
                totalPrice=estimate(draft.menu.price_per_person, draft.person_count),
            )
            if instructions:
                payload["specialInstructions"] = instructions
        return payload

    def _redirect_to_auth(self) -> SubmissionResult:
        self.draft_store.save(serialize_draft(self.draft))
        logger.info("No customer session; draft saved and redirecting to %s", self.auth_entry_url)
        return SubmissionResult(success=False, redirect_url=self.auth_entry_url)

    def submit(self) -> SubmissionResult:
        """
        Submit the draft as an order.

        Raises:
            ValidationError: A wizard step is invalid; nothing is sent.
        """
        if self._submitting:
            logger.info("Submission already in progress; ignoring duplicate submit")
            return SubmissionResult(success=False)

        for step in FORM_STEPS:
            self._check(step)

        if not self.session_store.is_authenticated():
            return self._redirect_to_auth()

        self._submitting = True
        try:
            data = self.api.create_order(self.build_order_payload())
        except Unauthenticated:
            self.session_store.clear()
            return self._redirect_to_auth()
        except (NetworkError, ServerRejection) as e:
            logger.warning("Order submission failed: %s", e)
            message = e.message if isinstance(e, ServerRejection) and e.status_code < 500 else SUBMIT_ERROR_MESSAGE
            self.notify("error", message)
            return SubmissionResult(success=False)
        finally:
            self._submitting = False

        reference = (data or {}).get("order_number")
        self.last_reference = reference
        self.draft_store.clear()
        self.reset()
        self.notify("success", SUBMIT_SUCCESS_MESSAGE.format(reference=reference))
        logger.info("Order %s submitted", reference)
        return SubmissionResult(success=True, reference=reference)

    # -------------------------------------------------------------------------
    # Resume after sign-in
    # -------------------------------------------------------------------------

    def _resolve_menu(self, menu_id: int) -> Optional[MenuSummary]:
        menu = self.find_menu(menu_id)
        if menu is not None:
            return menu
        try:
            return self.api.get_menu(menu_id)
        except (NetworkError, ServerRejection) as e:
            logger.warning("Saved menu %s could not be loaded: %s", menu_id, e)
            self.notify("error", "Le menu choisi n'est plus disponible. Veuillez en sélectionner un autre.")
            return None

    def restore_pending(self) -> bool:
        """Rebuild the draft saved before the sign-in redirect. Returns False if none."""
        data = self.draft_store.load()
        if not data:
            return False

        draft = OrderDraft()
        if data.get("custom"):
            draft = choose_custom(draft, data.get("customDescription") or "")
        elif data.get("menuId") is not None:
            menu = self._resolve_menu(int(data["menuId"]))
            if menu is not None:
                draft = select_menu(draft, menu)

        draft = set_delivery(
            draft,
            address=data.get("deliveryAddress") or "",
            city=data.get("deliveryCity") or None,
            delivery_date=parse_delivery_date(data.get("deliveryDate")),
            hour=data.get("deliveryHour") or None,
        )
        draft = set_person_count(draft, data.get("personCount") or 1)
        draft = set_instructions(draft, data.get("specialInstructions") or "")
        self.draft = draft

        # Resume on the first step that still needs input
        self.step = Step.RECAP
        for step in FORM_STEPS:
            if not is_step_valid(step, draft):
                self.step = step
                break

        logger.info("Restored pending draft at step %s", self.step.name)
        return True
