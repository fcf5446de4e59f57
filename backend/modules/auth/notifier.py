"""
Notification delivery for auth flows.

There is no mail transport: verification and reset messages are written
to the log so a developer can pick the token up from there.
"""

import logging

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """INotifier that logs each message at INFO level."""

    def send_verification_email(self, email: str) -> None:
        logger.info(f"Verification email sent to: {email}")

    def send_password_reset_email(self, email: str, token: str) -> None:
        logger.info(f"Password reset email sent to: {email}")
        logger.info(f"Reset token: {token}")
