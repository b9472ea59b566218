"""
Email Service - transactional emails through the SendGrid SMTP relay.

Without SENDGRID_API_KEY every send is logged and reported as delivered,
so local runs and tests never need mail credentials. Delivery failures are
logged and returned as False; they never fail the request that triggered
them.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from visadocs.core.config import get_settings

logger = logging.getLogger(__name__)

SMTP_HOST = "smtp.sendgrid.net"
SMTP_PORT = 587
SMTP_USER = "apikey"  # SendGrid relay login; the password is the API key


def send_email(to: str, subject: str, text_body: str, html_body: Optional[str] = None) -> bool:
    settings = get_settings()

    if not settings.sendgrid_api_key:
        logger.info("Email not sent (SENDGRID_API_KEY not set): to=%s subject=%r", to, subject)
        return True

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.from_email
    msg["To"] = to
    msg.attach(MIMEText(text_body, "plain"))
    if html_body:
        msg.attach(MIMEText(html_body, "html"))

    try:
        with smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=30) as server:
            server.starttls()
            server.login(SMTP_USER, settings.sendgrid_api_key)
            server.sendmail(settings.from_email, [to], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", to, e)
        return False

    logger.info("Email sent to %s: %r", to, subject)
    return True


def send_welcome_email(email: str, first_name: str) -> bool:
    settings = get_settings()
    text_body = (
        f"Hi {first_name},\n\n"
        "Welcome! Your account is ready. You can now upload visa decision letters, "
        "offer letters and Confirmation of Enrolment documents for analysis.\n\n"
        f"Sign in: {settings.frontend_url}/login\n"
    )
    html_body = (
        f"<p>Hi {first_name},</p>"
        "<p>Welcome! Your account is ready. You can now upload visa decision letters, "
        "offer letters and Confirmation of Enrolment documents for analysis.</p>"
        f'<p><a href="{settings.frontend_url}/login">Sign in</a></p>'
    )
    return send_email(email, "Welcome to your study visa assistant", text_body, html_body)


def send_appointment_confirmation(email: str, name: str, subject: str, preferred_contact: str) -> bool:
    text_body = (
        f"Hi {name},\n\n"
        f"We received your consultation request \"{subject}\". "
        f"A counsellor will contact you by {preferred_contact} shortly.\n"
    )
    return send_email(email, "Consultation request received", text_body)


def send_appointment_status_email(email: str, name: str, subject: str, status: str) -> bool:
    text_body = f"Hi {name},\n\nYour consultation request \"{subject}\" is now {status}.\n"
    return send_email(email, f"Consultation {status}", text_body)
