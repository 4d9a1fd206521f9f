import asyncio
import logging
import smtplib
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional, Tuple

import httpx

from helpers import settings
from helpers.errors import TransportError


logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"
SEND_TIMEOUT = 15.0


def reminder_subject(block_title: str) -> str:
    return f"🔔 Quiet Study Reminder: {block_title}"


async def send_email(to_address: str, subject: str, text: str, html: Optional[str] = None) -> None:
    """Delivers one message, preferring SendGrid over SMTP.

    Raises TransportError when no transport is configured or delivery fails.
    """
    sendgrid_key = settings.SENDGRID_API_KEY
    email_from = settings.EMAIL_FROM
    smtp_address = settings.SMTP_FROM_ADDRESS
    smtp_password = settings.SMTP_PASSWORD

    if sendgrid_key and email_from:
        await _send_with_sendgrid(sendgrid_key, email_from, to_address, subject, text, html)
        logger.info("Email sent via SendGrid to %s", to_address)
        return

    if smtp_address and smtp_password:
        await asyncio.to_thread(_send_with_smtp, to_address, subject, text, html)
        logger.info("Email sent via SMTP to %s", to_address)
        return

    raise TransportError("No email service configured")


async def _send_with_sendgrid(
    api_key: str,
    from_address: str,
    to_address: str,
    subject: str,
    text: str,
    html: Optional[str],
) -> None:
    content = [{"type": "text/plain", "value": text}]
    if html:
        content.append({"type": "text/html", "value": html})
    payload = {
        "personalizations": [{"to": [{"email": to_address}]}],
        "from": {"email": from_address},
        "subject": subject,
        "content": content,
    }
    try:
        async with httpx.AsyncClient(timeout=SEND_TIMEOUT) as client:
            response = await client.post(
                SENDGRID_URL,
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
            )
    except httpx.HTTPError as e:
        raise TransportError(f"SendGrid request failed: {e}") from e

    if response.status_code not in (200, 202):
        raise TransportError(f"SendGrid rejected the message ({response.status_code}): {response.text}")


def _send_with_smtp(to_address: str, subject: str, text: str, html: Optional[str]) -> None:
    user = settings.SMTP_FROM_USER
    smtp_server = settings.SMTP_SERVER
    smtp_port = settings.SMTP_PORT
    from_address = settings.SMTP_FROM_ADDRESS
    password = settings.SMTP_PASSWORD

    message = MIMEMultipart("alternative")
    message["From"] = f'"{user}" <{from_address}>' if user else from_address
    message["To"] = to_address
    message["Subject"] = subject
    message.attach(MIMEText(text, "plain"))
    if html:
        message.attach(MIMEText(html, "html"))

    try:
        if smtp_port == 465:
            with smtplib.SMTP_SSL(smtp_server, smtp_port) as server:
                server.login(from_address, password)
                server.send_message(message)
        else:
            with smtplib.SMTP(smtp_server, smtp_port) as server:
                server.starttls()
                server.login(from_address, password)
                server.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        raise TransportError(f"SMTP delivery failed: {e}") from e


def create_quiet_hour_email_template(
    user_name: str,
    block_title: str,
    start_time: datetime,
    lead_minutes: int = 10,
) -> Tuple[str, str]:
    formatted_time = start_time.astimezone(timezone.utc).strftime("%A, %B %d, %Y at %H:%M UTC")

    text = f"""Hi {user_name},

This is a friendly reminder that your quiet study block "{block_title}" starts in {lead_minutes} minutes.

Start Time: {formatted_time}

Please prepare your study space and get ready for a productive quiet study session!

Best regards,
Quiet Hours Scheduler"""

    name_html = escape(user_name)
    title_html = escape(block_title)
    message_html = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: #4f46e5; margin-bottom: 20px;">🔔 Quiet Study Reminder</h2>

        <p style="font-size: 16px; line-height: 1.5; color: #374151;">
            Hi <strong>{name_html}</strong>,
        </p>

        <p style="font-size: 16px; line-height: 1.5; color: #374151;">
            This is a friendly reminder that your quiet study block <strong>"{title_html}"</strong>
            starts in <span style="color: #dc2626; font-weight: bold;">{lead_minutes} minutes</span>.
        </p>

        <div style="background-color: #f3f4f6; padding: 15px; border-radius: 8px; margin: 20px 0;">
            <p style="margin: 0; font-size: 14px; color: #6b7280;"><strong>Start Time:</strong></p>
            <p style="margin: 5px 0 0 0; font-size: 18px; font-weight: bold; color: #111827;">{formatted_time}</p>
        </div>

        <p style="font-size: 16px; line-height: 1.5; color: #374151;">
            Please prepare your study space and get ready for a productive quiet study session! 📚
        </p>

        <hr style="border: none; border-top: 1px solid #e5e7eb; margin: 30px 0;">

        <p style="font-size: 14px; color: #6b7280; margin: 0;">
            Best regards,<br>
            <strong>Quiet Hours Scheduler</strong>
        </p>
    </div>
    """
    return text, message_html
