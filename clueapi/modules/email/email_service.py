"""
Email Service Module
====================

Sends transactional email through the Resend API.
Branding and addresses come from the Flask app config.
"""

import logging
from datetime import datetime
from html import escape
from typing import List, Optional

import resend

from ...core.utils import validate_email

logger = logging.getLogger(__name__)


class EmailService:
    """
    Resend-backed email service.

    Configuration (set in Flask app.config):
        NOTIFICATIONS_ENABLED: send nothing when False
        RESEND_API_KEY: Your Resend API key
        EMAIL_ADDRESS: Sender email address (default: onboarding@resend.dev)
        EMAIL_BRAND_NAME: Brand name for emails (default: 'Clue Analytics')
        EMAIL_WEBSITE_URL: Website URL
        EMAIL_SUPPORT_EMAIL: Support email shown to subscribers
        ADMIN_EMAIL: Destination for contact-form notifications
    """

    def __init__(self, app=None):
        self.enabled = False
        self.api_key = None
        self.sender_email = None
        self.brand_name = 'Clue Analytics'
        self.website_url = 'https://example.com'
        self.support_email = 'support@example.com'
        self.admin_email = None

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize email service with Flask app configuration"""
        self.enabled = bool(app.config.get('NOTIFICATIONS_ENABLED', True))
        self.sender_email = app.config.get('EMAIL_ADDRESS', 'onboarding@resend.dev')
        self.brand_name = app.config.get('EMAIL_BRAND_NAME', 'Clue Analytics')
        self.website_url = app.config.get('EMAIL_WEBSITE_URL', 'https://example.com')
        self.support_email = app.config.get('EMAIL_SUPPORT_EMAIL', 'support@example.com')
        self.admin_email = app.config.get('ADMIN_EMAIL')
        self.api_key = app.config.get('RESEND_API_KEY')

        if not self.enabled:
            logger.info("Email notifications disabled")
            return

        resend.api_key = self.api_key
        logger.info(f"Resend email service initialized (sender: {self.sender_email})")

    def send_email(self, to: List[str], subject: str, html_body: str,
                   text_body: Optional[str] = None) -> bool:
        """
        Send an email to each recipient via Resend.

        Returns:
            bool: True if at least one email was sent successfully, False otherwise
        """
        if not self.enabled:
            logger.debug(f"Notifications disabled - not sending '{subject}'")
            return False

        if not self.api_key:
            logger.error("Resend API key not configured")
            return False

        recipients = [addr for addr in to if validate_email(addr)]
        if not recipients:
            logger.error(f"No valid recipients for '{subject}'")
            return False

        sent_count = 0
        for recipient in recipients:
            params = {
                "from": self.sender_email,
                "to": recipient,
                "subject": subject,
                "html": html_body,
            }
            if text_body:
                params["text"] = text_body

            r = resend.Emails.send(params)
            if r and r.get('id'):
                logger.debug(f"Email sent to {recipient}, ID: {r['id']}")
                sent_count += 1
            else:
                logger.error(f"Resend error for {recipient}: {r}")

        return sent_count > 0

    # ==================== Subscription confirmation ====================

    def send_subscription_confirmation(self, email: str) -> bool:
        """Send the thank-you email to a new newsletter subscriber"""
        subject = f"Thank You for Subscribing to {self.brand_name}!"
        brand = escape(self.brand_name)
        website = escape(self.website_url, quote=True)
        support = escape(self.support_email, quote=True)

        html_body = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #1d4ed8;">Welcome to {brand}!</h2>
            <p>Thank you for subscribing to our newsletter. We're excited to share the latest insights, updates, and AI/ML solutions with you.</p>
            <p>Stay tuned for expert tips and strategies to transform your business with AI and Machine Learning.</p>
            <p style="margin-top: 20px;">
                <a href="{website}" style="background-color: #1d4ed8; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px;">Visit Our Website</a>
            </p>
            <p style="color: #6b7280; font-size: 12px; margin-top: 20px;">
                If you did not subscribe, please ignore this email or contact us at <a href="mailto:{support}">{support}</a>.
            </p>
        </div>
        """

        text_body = f"""
Welcome to {self.brand_name}!

Thank you for subscribing to our newsletter. We're excited to share the latest
insights, updates, and AI/ML solutions with you.

Visit our website: {self.website_url}

If you did not subscribe, please ignore this email or contact us at {self.support_email}.
        """

        return self.send_email([email], subject, html_body, text_body)

    # ==================== Admin notification ====================

    def send_contact_notification(self, name: str, email: str, message: str) -> bool:
        """Notify the admin about a new contact-form message"""
        if not self.admin_email:
            logger.warning("Admin email not configured - skipping contact notification")
            return False

        subject = f"New Contact Message from {self.brand_name}"
        received_at = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        admin_url = escape(self.website_url.rstrip('/') + '/#/admin', quote=True)

        html_body = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #1d4ed8;">New Contact Message</h2>
            <p><strong>Name:</strong> {escape(name)}</p>
            <p><strong>Email:</strong> {escape(email)}</p>
            <p><strong>Message:</strong> {escape(message)}</p>
            <p><strong>Received:</strong> {received_at}</p>
            <p style="margin-top: 20px;">
                <a href="{admin_url}" style="background-color: #1d4ed8; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px;">View in Admin Dashboard</a>
            </p>
        </div>
        """

        text_body = f"""
NEW CONTACT MESSAGE

- Name: {name}
- Email: {email}
- Received: {received_at}

{message}

---
{self.brand_name}
        """

        return self.send_email([self.admin_email], subject, html_body, text_body)
