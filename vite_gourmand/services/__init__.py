"""
Services Package for Vite & Gourmand
====================================

Business logic called by the API routes, kept free of HTTP concerns.

Modules:
--------
- order.py: Order creation with authoritative pricing, cancellation, admin status
- contact.py: Contact messages and support tickets
- ai_agent.py: Custom-menu assistant conversations (LLM or demo mode)

Services raise domain errors (e.g. ``OrderError``) and the routes translate
them into ``HTTPException``.
"""
