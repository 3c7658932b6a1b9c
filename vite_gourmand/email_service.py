"""
Email service for support ticket notifications.

Sends real emails via SMTP when configured, falls back to logging in mock mode.

Two messages are sent when a ticket is created from the contact form or the
custom menu composer:
- a confirmation to the visitor with their ticket number
- a notification to the owner (OWNER_EMAIL) with the full request

Environment variables:
- SMTP_HOST: SMTP server hostname (e.g., smtp.gmail.com)
- SMTP_PORT: SMTP server port (default: 587 for TLS)
- SMTP_USERNAME: SMTP authentication username
- SMTP_PASSWORD: SMTP authentication password
- SMTP_FROM_EMAIL: Sender email address
"""

import html
import logging
import os
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from . import config

logger = logging.getLogger(__name__)

# SMTP configuration from environment
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL")


def is_email_configured() -> bool:
    """Check if SMTP is properly configured."""
    return all([SMTP_HOST, SMTP_USERNAME, SMTP_PASSWORD, SMTP_FROM_EMAIL])


def _send_email(to_email: str, subject: str, body_text: str, body_html: str) -> dict:
    if not is_email_configured():
        # Mock mode - just log the email
        logger.info(
            "MOCK EMAIL to %s: Subject: %s | Body: %s",
            to_email,
            subject,
            body_text[:200] + "...",
        )
        return {
            "status": "sent",
            "to_email": to_email,
            "subject": subject,
            "mock": True,
            "message": "Email logged (SMTP not configured)",
        }

    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = SMTP_FROM_EMAIL
        msg["To"] = to_email
        msg.attach(MIMEText(body_text, "plain"))
        msg.attach(MIMEText(body_html, "html"))

        context = ssl.create_default_context()
        with smtplib.SMTP(SMTP_HOST, SMTP_PORT) as server:
            server.starttls(context=context)
            server.login(SMTP_USERNAME, SMTP_PASSWORD)
            server.sendmail(SMTP_FROM_EMAIL, to_email, msg.as_string())

        logger.info("Email '%s' sent to %s", subject, to_email)
        return {
            "status": "sent",
            "to_email": to_email,
            "subject": subject,
            "mock": False,
        }

    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", to_email, str(e))
        return {
            "status": "error",
            "to_email": to_email,
            "error": str(e),
        }


def send_ticket_confirmation_email(
    to_email: str,
    name: str,
    ticket_number: str,
    subject_line: str,
) -> dict:
    """
    Send the visitor a confirmation with their ticket number.

    Returns:
        dict with status and details
    """
    subject = f"Votre demande a bien été reçue — {ticket_number}"

    body_text = f"""Bonjour {name},

Merci de nous avoir contactés ! Votre message a bien été reçu et un ticket de suivi a été créé.

Numéro de ticket : {ticket_number}
Sujet : « {subject_line} »

Conservez ce numéro : il vous permettra de suivre l'avancement de votre demande.
Un membre de l'équipe prendra en charge votre demande sous 24 h.

{config.COMPANY_NAME}
"""

    body_html = f"""
<html>
<body style="font-family: 'Segoe UI', Tahoma, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
<h2 style="color: #722F37;">Bonjour {html.escape(name)},</h2>
<p>Merci de nous avoir contactés ! Votre message a bien été reçu et un ticket de suivi a été créé.</p>
<div style="border: 2px solid #D4AF37; border-radius: 12px; padding: 20px; text-align: center; margin: 24px 0;">
<p style="color: #722F37; font-size: 12px; text-transform: uppercase; letter-spacing: 2px;">Numéro de ticket</p>
<p style="font-size: 28px; font-weight: 800;">{ticket_number}</p>
<p style="color: #666; font-size: 13px;">« {html.escape(subject_line)} »</p>
</div>
<p><strong>Conservez ce numéro</strong> : il vous permettra de suivre l'avancement de votre demande.</p>
<p>Un membre de l'équipe prendra en charge votre demande sous 24 h.</p>
<p><strong>{html.escape(config.COMPANY_NAME)}</strong></p>
</body>
</html>
"""

    return _send_email(to_email, subject, body_text, body_html)


def send_owner_ticket_notification(
    ticket_number: str,
    name: str,
    email: str,
    title: str,
    description: str,
    phone: Optional[str] = None,
    to_email: Optional[str] = None,
) -> dict:
    """Notify the owner that a new ticket was created."""
    to_email = to_email or config.OWNER_EMAIL
    subject = f"[Nouveau ticket] {ticket_number} — {title}"

    phone_line = f"Téléphone : {phone}\n" if phone else ""
    body_text = f"""Nouveau ticket de contact {ticket_number}

Nom : {name}
Email : {email}
{phone_line}Sujet : {title}

Message :
{description}
"""

    phone_row = (
        f"<tr><td style='padding: 4px 8px; color: #722F37;'>Téléphone</td><td style='padding: 4px 8px;'>{html.escape(phone)}</td></tr>"
        if phone
        else ""
    )
    body_html = f"""
<html>
<body style="font-family: 'Segoe UI', Tahoma, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
<h2>Nouveau ticket de contact</h2>
<p style="font-size: 18px; font-weight: 800;">{ticket_number}</p>
<table style="border-collapse: collapse; width: 100%;">
<tr><td style='padding: 4px 8px; color: #722F37;'>Nom</td><td style='padding: 4px 8px;'>{html.escape(name)}</td></tr>
<tr><td style='padding: 4px 8px; color: #722F37;'>Email</td><td style='padding: 4px 8px;'>{html.escape(email)}</td></tr>
{phone_row}
<tr><td style='padding: 4px 8px; color: #722F37;'>Sujet</td><td style='padding: 4px 8px;'>{html.escape(title)}</td></tr>
</table>
<div style="background: #f9fafb; border-left: 4px solid #D4AF37; padding: 14px 18px; margin: 16px 0; white-space: pre-wrap;">{html.escape(description)}</div>
</body>
</html>
"""

    result = _send_email(to_email, subject, body_text, body_html)
    if result["status"] == "sent":
        logger.info("Owner notification sent to %s for ticket %s", to_email, ticket_number)
    return result
