"""
Custom Menu Brief
=================

A brief is the structured summary of a visitor's custom menu request. It is
filled two ways:

1. **Extraction** from the assistant conversation. After every exchange the
   user message and the assistant reply are scanned with an ordered list of
   French patterns. A rule only fills a field that is still empty and the
   first match wins, so a value never changes once captured.
2. **Manual edits** in the brief form, which may overwrite anything.

The finished brief is sent as the description of a contact ticket, built by
:func:`build_brief_text`.

Captured numbers stay display strings ("80 personnes", "45€/personne"); they
are read by people on the ticket, not re-parsed.

Usage:
------
    brief = Brief()
    brief = extract_brief(brief, "Mariage pour 80 personnes le 15 juin", reply)
    brief.event_type   # "Mariage"
    brief.guest_count  # "80 personnes"
"""

import re
from dataclasses import dataclass, fields, replace
from typing import Callable, List, Pattern, Tuple


@dataclass(frozen=True)
class Brief:
    event_type: str = ""
    guest_count: str = ""
    budget: str = ""
    date: str = ""
    dietary_needs: str = ""
    allergies: str = ""
    preferences: str = ""
    ai_proposal: str = ""
    additional_notes: str = ""

    def edit(self, **changes: str) -> "Brief":
        """Return a copy with fields set explicitly (manual form edits)."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise TypeError(f"Unknown brief field(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)


# =============================================================================
# Extraction Rules
# =============================================================================
# Order matters: rules run in this order and the first match for a field wins.

def _capitalize(match: "re.Match") -> str:
    value = match.group(1)
    return value[0].upper() + value[1:]


Rule = Tuple[str, Pattern, Callable[["re.Match"], str]]

EXTRACTION_RULES: List[Rule] = [
    (
        "event_type",
        re.compile(
            r"(mariage|anniversaire|s[eé]minaire|bapt[eê]me|communion|f[eê]te|gala|"
            r"soir[eé]e|cocktail|enterrement de vie|team.?building|repas d'affaire)"
        ),
        _capitalize,
    ),
    (
        "guest_count",
        re.compile(r"(\d+)\s*(personnes|convives|invit[eé]s|pers\b|couverts)"),
        lambda m: f"{m.group(1)} personnes",
    ),
    (
        "budget",
        re.compile(r"(\d+)\s*[€e](?:uros?)?\s*(?:/|par)\s*(?:pers|personne|convive)"),
        lambda m: f"{m.group(1)}€/personne",
    ),
    (
        "budget",
        re.compile(r"budget\s*(?:de\s*)?(\d+)\s*[€e]"),
        lambda m: f"{m.group(1)}€/personne",
    ),
    (
        "date",
        re.compile(
            r"(\d{1,2}\s+(?:janvier|f[eé]vrier|mars|avril|mai|juin|juillet|ao[uû]t|"
            r"septembre|octobre|novembre|d[eé]cembre)\s*\d{0,4})"
        ),
        lambda m: m.group(1).strip(),
    ),
    (
        "dietary_needs",
        re.compile(r"(v[eé]g[eé]tarien|v[eé]gan|sans gluten|halal|casher|pescetarien)"),
        lambda m: m.group(1),
    ),
    (
        "allergies",
        re.compile(r"allerg\w+\s+(?:aux?\s+)?([^,.]+)"),
        lambda m: m.group(1).strip(),
    ),
]

PROPOSAL_MARKER = "MENU"
PROPOSAL_SECTION_MARKERS = ("ENTRÉE", "PLAT", "convives")


def looks_like_proposal(assistant_message: str) -> bool:
    """True when the assistant reply reads like a formatted menu proposal."""
    return PROPOSAL_MARKER in assistant_message and any(
        marker in assistant_message for marker in PROPOSAL_SECTION_MARKERS
    )


def extract_brief(brief: Brief, user_message: str, assistant_message: str) -> Brief:
    """
    Fill the empty fields of ``brief`` from one conversation exchange.

    Non-empty fields are never touched, so calling this again with the same
    text returns an equal brief.
    """
    combined = f"{user_message} {assistant_message}".lower()
    updates = {}

    for field_name, pattern, transform in EXTRACTION_RULES:
        if getattr(brief, field_name) or field_name in updates:
            continue
        match = pattern.search(combined)
        if match:
            updates[field_name] = transform(match)

    if not brief.ai_proposal and looks_like_proposal(assistant_message):
        updates["ai_proposal"] = assistant_message

    if not updates:
        return brief
    return replace(brief, **updates)


def copy_to_proposal(brief: Brief, text: str) -> Brief:
    """Use a chosen assistant message as the brief's proposal."""
    return replace(brief, ai_proposal=text)


# =============================================================================
# Completeness
# =============================================================================

REQUIRED_FIELDS = ("event_type", "guest_count", "budget", "date")


def missing_fields(brief: Brief) -> List[str]:
    return [name for name in REQUIRED_FIELDS if not getattr(brief, name).strip()]


def brief_progress(brief: Brief) -> int:
    """Percentage of required fields filled."""
    filled = len(REQUIRED_FIELDS) - len(missing_fields(brief))
    return round(filled / len(REQUIRED_FIELDS) * 100)


def is_brief_ready(brief: Brief) -> bool:
    return not missing_fields(brief)


# =============================================================================
# Ticket Text
# =============================================================================

BRIEF_HEADER = "═══ DEMANDE DE MENU PERSONNALISÉ ═══"


def build_brief_text(brief: Brief) -> str:
    lines = [
        BRIEF_HEADER,
        "",
        f"🎉 Événement : {brief.event_type or 'Non précisé'}",
        f"👥 Convives : {brief.guest_count or 'Non précisé'}",
        f"💰 Budget : {brief.budget or 'Non précisé'}",
        f"📅 Date : {brief.date or 'Non précisée'}",
        f"🥗 Régimes : {brief.dietary_needs or 'Aucun'}",
        f"⚠️ Allergies : {brief.allergies or 'Aucune'}",
        f"🎨 Préférences : {brief.preferences or 'Aucune'}",
    ]

    if brief.ai_proposal:
        lines.extend(["", "─── PROPOSITION IA ───", "", brief.ai_proposal])

    if brief.additional_notes:
        lines.extend(["", "─── NOTES ADDITIONNELLES ───", "", brief.additional_notes])

    return "\n".join(lines)


def build_ticket_title(brief: Brief) -> str:
    event = brief.event_type or "Événement"
    guests = brief.guest_count or "?"
    return f"Menu personnalisé — {event} ({guests} convives)"

