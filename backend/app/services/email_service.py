"""
Service d'envoi d'emails SMTP.
Utilisé par le fournisseur d'identité local : vérification d'adresse et réinitialisation du mot de passe.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.config import settings

logger = logging.getLogger(__name__)


def send_verification_email(to_email: str, verification_link: str) -> None:
    """Envoie le lien de confirmation d'adresse après l'inscription. Lève une exception en cas d'échec SMTP."""
    app_name = settings.app_branding()["app_name"]
    _send_html_email(
        to_email,
        subject=f"{app_name} — Confirm your email address",
        html_content=f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: auto;">
        <h2 style="color: #1a73e8;">{app_name}</h2>
        <p>Thank you for signing up.</p>
        <p>Please confirm your email address by following this link:</p>
        <p style="text-align: center; margin: 24px 0;">
          <a href="{verification_link}">Confirm my email</a>
        </p>
        <hr style="border: none; border-top: 1px solid #eee;" />
        <p style="font-size: 12px; color: #888;">
          This message was generated automatically. Please do not reply.
        </p>
      </body>
    </html>
    """,
    )
    logger.info("Email de vérification envoyé à %s", to_email)


def send_password_reset_email(to_email: str, reset_link: str) -> None:
    """Envoie le lien de réinitialisation du mot de passe."""
    app_name = settings.app_branding()["app_name"]
    _send_html_email(
        to_email,
        subject=f"{app_name} — Reset your password",
        html_content=f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: auto;">
        <h2 style="color: #1a73e8;">{app_name}</h2>
        <p>A password reset was requested for this account.</p>
        <p style="text-align: center; margin: 24px 0;">
          <a href="{reset_link}">Choose a new password</a>
        </p>
        <p>If you did not request it, you can ignore this email.</p>
      </body>
    </html>
    """,
    )
    logger.info("Email de réinitialisation envoyé à %s", to_email)


def _send_html_email(to_email: str, subject: str, html_content: str) -> None:
    msg = MIMEMultipart("alternative")
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.attach(MIMEText(html_content, "html", "utf-8"))

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USERNAME:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)
