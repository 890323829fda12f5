"""
Email delivery for registration passcodes.

Sends the 6-digit OTP code over SMTP (configurable via settings). When
SMTP is not configured, development and test environments log the
message instead of sending it; production treats that as a delivery
failure.
"""

import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from fintrack.config import settings
from fintrack.services.exceptions import EmailDeliveryError


logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending authentication-related emails."""

    def send_otp_email(self, email: str, code: str) -> None:
        """
        Send a registration passcode.

        Args:
            email: Recipient email address
            code: The plaintext one-time code

        Raises:
            EmailDeliveryError: If the message could not be sent
        """
        minutes = max(settings.otp_expire_seconds // 60, 1)

        subject = f"Your verification code - {settings.app_name}"
        html_body = f"""
        <html>
        <body>
            <h2>Verify your email</h2>
            <p>Use the code below to finish creating your {settings.app_name} account:</p>
            <p style="font-size: 24px; letter-spacing: 4px;"><strong>{code}</strong></p>
            <p>This code will expire in {minutes} minutes.</p>
            <p>If you didn't request this, you can safely ignore this email.</p>
        </body>
        </html>
        """
        text_body = f"""
        Verify your email

        Your {settings.app_name} verification code is: {code}

        This code will expire in {minutes} minutes.

        If you didn't request this, you can safely ignore this email.
        """

        self._send_email(email, subject, html_body, text_body)

    def _send_email(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> None:
        """
        Send an email using SMTP.

        Raises:
            EmailDeliveryError: If SMTP is unconfigured in production, or the
                server rejects or drops the message
        """
        if not settings.is_email_configured:
            if settings.is_production:
                logger.error("Email not configured in production, cannot send to recipient")
                raise EmailDeliveryError(to_email, "SMTP is not configured")

            logger.warning(
                f"Email not configured. Would have sent email to {to_email}: {subject}"
            )
            logger.info(f"Email body: {text_body[:500]}...")
            return

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{settings.smtp_from_name} <{settings.smtp_from_email}>"
        msg["To"] = to_email

        # Attach both plain text and HTML versions
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        try:
            with smtplib.SMTP(
                settings.smtp_host,
                settings.smtp_port,
                timeout=settings.smtp_timeout_seconds,
            ) as server:
                server.starttls()
                server.login(settings.smtp_user, settings.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email: {e}")
            raise EmailDeliveryError(to_email, str(e)) from e

        logger.info("Verification email sent")
