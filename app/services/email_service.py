'''
# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# Created Date: Thu Aug 07 2025
# SPDX-License-Identifier: MIT
'''

import html
import logging

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import settings
from app.db import models

logger = logging.getLogger(__name__)

ROLE_WELCOME_MESSAGES = {
    "donor": "Thank you for choosing to make a difference. Your contribution can help feed someone in need.",
    "volunteer": "We appreciate your willingness to serve. Your time and effort make this mission possible.",
    "ngo": "Thank you for partnering with us. Together, we can make food reach those who need it most.",
}

ROLE_NEXT_STEPS = {
    "donor": "Start by listing surplus food you would like to donate.",
    "volunteer": "Your NGO can now assign you deliveries. Check your dashboard for new tasks.",
    "ngo": "Start by claiming available food donations and coordinating with your volunteers.",
}


class EmailService:
    def __init__(self):
        self.sg = SendGridAPIClient(settings.sendgrid_api_key)
        self.sender_email = settings.mail_sender_email
        self.sender_name = settings.mail_sender_name

    async def send_welcome_email(self, user: models.User):
        """
        Welcomes a newly registered account and explains that an admin will review it.
        """
        role_message = ROLE_WELCOME_MESSAGES.get(user.role, "Welcome to the Zero Hunger platform!")
        subject = "Welcome to Zero Hunger!"
        html_content = f"""
        <html>
        <body>
            <p>Hi {html.escape(user.name)},</p>
            <p>Your account has been created as a <strong>{user.role}</strong>.</p>
            <p>{role_message}</p>
            <p>An administrator will review your account shortly.</p>
            <p>Best regards,</p>
            <p>{self.sender_name}</p>
        </body>
        </html>
        """
        await self._send_email(user.email, subject, html_content)

    async def send_approval_email(self, user: models.User):
        next_steps = ROLE_NEXT_STEPS.get(user.role, "Explore the platform and start contributing to our mission.")
        subject = "Your Zero Hunger account has been approved"
        html_content = f"""
        <html>
        <body>
            <p>Congratulations, {html.escape(user.name)}!</p>
            <p>Your account has been approved and you can now use the platform.</p>
            <p><strong>Next steps:</strong> {next_steps}</p>
            <p><a href="{settings.frontend_url}/login">Log in to Zero Hunger</a></p>
            <p>Best regards,</p>
            <p>{self.sender_name}</p>
        </body>
        </html>
        """
        await self._send_email(user.email, subject, html_content)

    async def send_reset_password_email(self, to_email: str, reset_link: str):
        subject = "Reset your password"
        html_content = f"""
        <html>
        <body>
            <p>Click the link below to reset your password:</p>
            <p><a href="{reset_link}">{reset_link}</a></p>
            <p><strong>Note:</strong> This link expires in 1 hour.</p>
            <p>If you did not request a password reset, you can safely ignore this email.</p>
        </body>
        </html>
        """
        await self._send_email(to_email, subject, html_content)

    async def send_contact_email(self, name: str, email: str, subject: str, message: str):
        inbox = settings.contact_inbox_email or self.sender_email
        html_content = f"""
        <html>
        <body>
            <p><strong>From:</strong> {html.escape(name)} &lt;{html.escape(email)}&gt;</p>
            <p><strong>Subject:</strong> {html.escape(subject)}</p>
            <p>{html.escape(message)}</p>
        </body>
        </html>
        """
        await self._send_email(inbox, f"Contact form: {subject}", html_content)

    async def send_notification_email(self, to_email: str, message: str):
        html_content = f"""
        <html>
        <body>
            <p>{html.escape(message)}</p>
            <p>{self.sender_name}</p>
        </body>
        </html>
        """
        await self._send_email(to_email, "Notification from Zero Hunger", html_content)

    async def _send_email(self, to_email: str, subject: str, html_content: str):
        """
        Internal helper to send an email using SendGrid.
        """
        message = Mail(
            from_email=(self.sender_email, self.sender_name),
            to_emails=to_email,
            subject=subject,
            html_content=html_content
        )
        try:
            response = self.sg.send(message)
            logger.info("Email sent to %s. Status Code: %s", to_email, response.status_code)
        except Exception:
            logger.exception("Error sending email to %s", to_email)
