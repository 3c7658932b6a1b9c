"""
Menu Assistant Service for Vite & Gourmand
==========================================

This module runs the conversational assistant that helps visitors compose a
custom menu for their event. The assistant is grounded in the real catalog:
every new conversation starts with a system prompt that embeds the dishes,
published menus, diets, themes and allergens currently in the database.

Conversation Storage:
---------------------
Conversations live in an in-memory dictionary protected by a lock:

    {conversation_id: {"messages": [...], "context": {...}, "created_at": datetime, "lock": Lock}}

Each conversation also has its own lock, held for a whole turn (user
message, reply, assistant message) so that turns never interleave.

Conversations older than CONVERSATION_TTL_SECONDS (default: 2 hours) are
dropped the next time the store is touched. Nothing is persisted; a restart
loses every open conversation, which the client tolerates by starting a new
one.

Reply Generation:
-----------------
- With LLM_API_KEY set, the full message list goes to the chat model.
  Any model error becomes a fixed French apology instead of an HTTP error.
- Without a key the assistant is in **demo mode** and answers from canned
  replies keyed on the last user message (guest count, then budget, then
  dietary constraints).

Usage:
------
    from vite_gourmand.services.ai_agent import chat

    result = chat(db, "Mariage pour 80 personnes")
    result["conversationId"]  # echo it on the next message
"""

import logging
import random
import re
import string
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from openai import OpenAIError
from sqlalchemy.orm import Session, selectinload

from .. import config
from ..llm_client import call_chat_model, is_llm_enabled
from ..models import Allergen, Diet, Dish, Menu, Theme

logger = logging.getLogger(__name__)

LLM_ERROR_REPLY = "Erreur de communication avec l'IA. Veuillez réessayer dans quelques instants."


# =============================================================================
# Conversation Store
# =============================================================================

CONVERSATIONS: Dict[str, Dict[str, Any]] = {}
_conversations_lock = threading.Lock()


def _cleanup_expired_conversations() -> int:
    """Drop conversations older than the TTL. Caller must hold the lock."""
    cutoff = datetime.now(timezone.utc).timestamp() - config.CONVERSATION_TTL_SECONDS
    expired = [
        conv_id
        for conv_id, conv in CONVERSATIONS.items()
        if conv["created_at"].timestamp() < cutoff
    ]
    for conv_id in expired:
        del CONVERSATIONS[conv_id]
    if expired:
        logger.debug("Dropped %d expired assistant conversations", len(expired))
    return len(expired)


def generate_conversation_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"conv_{int(time.time() * 1000)}_{suffix}"


def clear_conversations() -> None:
    with _conversations_lock:
        CONVERSATIONS.clear()


# =============================================================================
# Prompt Construction
# =============================================================================

def build_catalog_context(db: Session) -> str:
    """Describe the current catalog for the system prompt."""
    dishes = db.query(Dish).options(selectinload(Dish.allergens)).order_by(Dish.id).all()
    menus = (
        db.query(Menu)
        .options(selectinload(Menu.dishes), selectinload(Menu.diet), selectinload(Menu.theme))
        .filter(Menu.status == "published")
        .order_by(Menu.id)
        .all()
    )
    diets = db.query(Diet).order_by(Diet.id).all()
    themes = db.query(Theme).order_by(Theme.id).all()
    allergens = db.query(Allergen).order_by(Allergen.id).all()

    dish_lines = []
    for dish in dishes:
        allergen_names = ", ".join(a.name for a in dish.allergens) or "aucun"
        dish_lines.append(
            f'  - [ID:{dish.id}] "{dish.title}" ({dish.course_type or "plat"}) — '
            f"{dish.description or 'Pas de description'}. Allergènes: {allergen_names}"
        )

    menu_lines = []
    for menu in menus:
        dish_names = ", ".join(d.title for d in menu.dishes) or "aucun"
        seasonal = " (saisonnier)" if menu.is_seasonal else ""
        menu_lines.append(
            f'  - [ID:{menu.id}] "{menu.title}" — {menu.price_per_person:g}€/pers, '
            f"min {menu.person_min} pers. Régime: {menu.diet.name if menu.diet else 'aucun'}. "
            f"Thème: {menu.theme.name if menu.theme else 'aucun'}. Plats: {dish_names}{seasonal}"
        )

    diet_lines = [f"  - [ID:{d.id}] {d.name}: {d.description or ''}" for d in diets]
    theme_lines = [f"  - [ID:{t.id}] {t.name}: {t.description or ''}" for t in themes]
    allergen_lines = [f"  - [ID:{a.id}] {a.name}" for a in allergens]

    return "\n".join([
        "═══ BASE DE DONNÉES VITE & GOURMAND ═══",
        "",
        f"PLATS DISPONIBLES ({len(dishes)}):",
        *dish_lines,
        "",
        f"MENUS PUBLIÉS ({len(menus)}):",
        *menu_lines,
        "",
        "RÉGIMES ALIMENTAIRES:",
        *diet_lines,
        "",
        "THÈMES:",
        *theme_lines,
        "",
        "ALLERGÈNES RÉPERTORIÉS:",
        *allergen_lines,
    ])


SYSTEM_PROMPT_BASE = """Tu es l'assistant IA de "Vite & Gourmand", un service de traiteur haut de gamme.
Ton rôle est d'aider les visiteurs à composer un menu personnalisé pour leur événement.
Tu es intégré dans la page de commande, à côté d'un brief que le visiteur remplit en parallèle.

CHAMPS OBLIGATOIRES À COLLECTER :
- 🎉 Type d'événement (mariage, anniversaire, séminaire, baptême, etc.)
- 👥 Nombre de convives
- 💰 Budget par personne
- 📅 Date souhaitée de l'événement
Ne propose JAMAIS un menu complet tant que ces 4 champs ne sont pas renseignés.

INFORMATIONS RECOMMANDÉES :
- 🥗 Régimes alimentaires (végétarien, halal, sans gluten…)
- ⚠️ Allergies à prendre en compte
- 🎨 Thème ou ambiance souhaitée

RÈGLES :
1. Tu parles TOUJOURS en français, de manière professionnelle et chaleureuse.
2. Tu t'appuies UNIQUEMENT sur les plats et menus réels de la base de données ci-dessous.
3. Tu proposes des menus adaptés au budget (prix/personne × nombre de convives).
4. Tu respectes STRICTEMENT les contraintes d'allergènes et de régime.
5. Tu suggères des services complémentaires : décoration, animation, boissons, service en salle.
6. Si tu ne peux pas satisfaire une demande avec les plats existants, dis-le clairement.
7. Quand la proposition est validée, invite le visiteur à vérifier le brief puis à cliquer
   "Envoyer la demande" pour que l'équipe reçoive un ticket avec tous les détails.

FORMAT MENU PERSONNALISÉ (uniquement pour les propositions finales) :
═══════════════════════════
🍽️ MENU « [Nom du menu] »
Pour [X] convives — [budget]€/personne
Thème : [thème] | Régime : [régime]
───────────────────────────
🥗 ENTRÉE : [Nom du plat]
🍖 PLAT : [Nom du plat]
🍰 DESSERT : [Nom du plat]
───────────────────────────
💰 Total estimé : [X]€ ([Y]€/pers × [Z] convives)
📝 Notes : [remarques spéciales]
═══════════════════════════
"""


def build_system_prompt(catalog_context: str) -> str:
    return f"{SYSTEM_PROMPT_BASE}\n{catalog_context}\n"


def build_constraints_message(context: Dict[str, Any]) -> Optional[str]:
    """Return the extra system message for caller-supplied constraints, if any."""
    constraints = []
    if context.get("guestCount"):
        constraints.append(f"{context['guestCount']} convives")
    if context.get("budgetPerPerson"):
        constraints.append(f"budget {context['budgetPerPerson']:g}€/personne")
    if context.get("dietId"):
        constraints.append(f"régime alimentaire ID:{context['dietId']}")
    if context.get("themeId"):
        constraints.append(f"thème ID:{context['themeId']}")
    if context.get("excludeAllergens"):
        ids = ", ".join(str(a) for a in context["excludeAllergens"])
        constraints.append(f"allergènes à exclure IDs: {ids}")

    if not constraints:
        return None
    return (
        "Contexte client transmis par l'équipe : "
        + " | ".join(constraints)
        + ". Utilise ces informations dans tes propositions."
    )


# =============================================================================
# Demo Mode
# =============================================================================

DEMO_GREETING = """Bonjour ! 👋 Je suis l'assistant IA de Vite & Gourmand.

Je suis là pour vous aider à composer le menu idéal pour votre événement !

Pour commencer, dites-moi :
1. 🎉 Quel **type d'événement** organisez-vous ?
2. 👥 **Combien de convives** seront présents ?
3. 💰 Avez-vous un **budget par personne** en tête ?
4. 🥗 Des **régimes alimentaires** à respecter ? (végétarien, sans gluten…)
5. ⚠️ Des **allergies** à prendre en compte ?

> ℹ️ **Mode démo** — Les réponses sont pré-configurées."""

DEMO_ASK_BUDGET = """Parfait, j'ai bien noté ! 👥

Maintenant, quel **budget par personne** envisagez-vous ?
Par exemple : 25€, 35€, 50€/personne…

> ℹ️ Mode démo — réponses pré-définies."""

DEMO_ASK_DIET = """Excellent, budget noté ! 💰

Y a-t-il des **contraintes alimentaires** à prendre en compte ?
- Végétarien, végan, sans gluten, halal…
- Des **allergies** particulières ?

> ℹ️ Mode démo — En production, je vous proposerai un menu complet."""

DEMO_FALLBACK = """Merci pour ces précisions ! 📝

En mode démo, je ne peux malheureusement pas générer de proposition complète.
Vérifiez le brief et cliquez sur « Envoyer la demande » : notre équipe vous
répondra avec une proposition personnalisée sous 24h ! 📧

> ℹ️ Mode démo actif."""

_GUEST_HINT = re.compile(r"\d+\s*(pers|invit|conviv)")


def get_demo_response(messages: List[Dict[str, str]]) -> str:
    user_messages = [m for m in messages if m["role"] == "user"]
    last = user_messages[-1]["content"].lower() if user_messages else ""

    if len(user_messages) == 1:
        return DEMO_GREETING
    if "convive" in last or "personne" in last or _GUEST_HINT.search(last):
        return DEMO_ASK_BUDGET
    if "budget" in last or "€" in last or "euro" in last:
        return DEMO_ASK_DIET
    return DEMO_FALLBACK


def _generate_reply(messages: List[Dict[str, str]]) -> str:
    if not is_llm_enabled():
        return get_demo_response(messages)

    try:
        return call_chat_model(messages)
    except OpenAIError as e:
        logger.error("Chat model call failed: %s", str(e))
        return LLM_ERROR_REPLY


def _visible_count(messages: List[Dict[str, str]]) -> int:
    return sum(1 for m in messages if m["role"] != "system")


# =============================================================================
# Public Operations
# =============================================================================

def chat(
    db: Session,
    message: str,
    conversation_id: Optional[str] = None,
    constraints: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Add a user message to a conversation and return the assistant reply.

    An unknown or expired ``conversation_id`` starts a fresh conversation
    under that id; ``constraints`` are only read at creation.
    """
    conv_id = conversation_id or generate_conversation_id()

    with _conversations_lock:
        _cleanup_expired_conversations()
        conversation = CONVERSATIONS.get(conv_id)

    if conversation is None:
        context = {k: v for k, v in (constraints or {}).items() if v is not None}
        messages = [{"role": "system", "content": build_system_prompt(build_catalog_context(db))}]
        extra = build_constraints_message(context)
        if extra:
            messages.append({"role": "system", "content": extra})
        created = {
            "messages": messages,
            "context": context,
            "created_at": datetime.now(timezone.utc),
            "lock": threading.Lock(),
        }
        # Concurrent first messages for the same id share one conversation
        with _conversations_lock:
            conversation = CONVERSATIONS.setdefault(conv_id, created)
        if conversation is created:
            logger.info("Started assistant conversation %s", conv_id)

    with conversation["lock"]:
        conversation["messages"].append({"role": "user", "content": message})
        reply = _generate_reply(list(conversation["messages"]))
        conversation["messages"].append({"role": "assistant", "content": reply})
        message_count = _visible_count(conversation["messages"])

    return {
        "conversationId": conv_id,
        "message": reply,
        "context": conversation["context"],
        "messageCount": message_count,
    }


def get_conversation(conversation_id: str) -> Optional[Dict[str, Any]]:
    with _conversations_lock:
        _cleanup_expired_conversations()
        conversation = CONVERSATIONS.get(conversation_id)
    if conversation is None:
        return None
    return {
        "conversationId": conversation_id,
        "messages": [
            {"role": m["role"], "content": m["content"]}
            for m in conversation["messages"]
            if m["role"] != "system"
        ],
        "context": conversation["context"],
        "createdAt": conversation["created_at"],
    }


def list_conversations() -> List[Dict[str, Any]]:
    with _conversations_lock:
        _cleanup_expired_conversations()
        summaries = [
            {
                "id": conv_id,
                "messageCount": _visible_count(conv["messages"]),
                "createdAt": conv["created_at"],
            }
            for conv_id, conv in CONVERSATIONS.items()
        ]
    return sorted(summaries, key=lambda s: s["createdAt"], reverse=True)


def delete_conversation(conversation_id: str) -> bool:
    with _conversations_lock:
        return CONVERSATIONS.pop(conversation_id, None) is not None


def get_status() -> Dict[str, Any]:
    enabled = is_llm_enabled()
    with _conversations_lock:
        _cleanup_expired_conversations()
        active = len(CONVERSATIONS)
    return {
        "aiEnabled": enabled,
        "model": config.LLM_MODEL if enabled else "demo",
        "activeConversations": active,
    }
