# maxfit/utils/email.py

import logging
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from maxfit import config

logger = logging.getLogger(__name__)


def send_otp_email(to_email: str, otp: str):
    """Send the code by email. Runs as a background task, so failures are logged, not raised."""
    if not config.SENDGRID_API_KEY or not config.SENDER_EMAIL:
        logger.error("SENDGRID_API_KEY and SENDER_EMAIL must be set to send OTP emails")
        return

    message = Mail(
        from_email=config.SENDER_EMAIL,
        to_emails=to_email,
        subject="Your MaxFit verification code",
        html_content=(
            f"<strong>Your verification code is: {otp}</strong>"
            f"<p>It will expire in {config.OTP_EXPIRE_MINUTES} minutes.</p>"
        ),
    )
    try:
        sg = SendGridAPIClient(config.SENDGRID_API_KEY)
        response = sg.send(message)
        logger.info("OTP email sent to %s, status code: %s", to_email, response.status_code)
    except Exception as e:
        logger.error("Error sending OTP email to %s: %s", to_email, e)
