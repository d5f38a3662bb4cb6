"""
Email Module
============

Provides email sending through the Resend API and background dispatch of
notification emails.
"""

from .email_service import EmailService
from .notifier import Notifier

__all__ = ['EmailService', 'Notifier']
