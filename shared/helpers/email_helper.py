import logging
import re
from typing import List, Optional

from ..utils.email_client import EmailClient
from ..core.config import settings

logger = logging.getLogger(__name__)


class EmailHelper:
    """Sends HTML emails through EmailClient when SMTP is configured."""

    def __init__(self):
        self.mailer = None
        if settings.SMTP_HOST:
            self.mailer = EmailClient(
                smtp_host=settings.SMTP_HOST,
                smtp_port=settings.SMTP_PORT,
                username=settings.SMTP_USERNAME,
                password=settings.SMTP_PASSWORD,
                use_ssl=settings.SMTP_USE_SSL,
            )

    def send_email(
        self,
        recipients: List[str],
        subject: str,
        html_body: str,
        attachments: Optional[List[tuple]] = None
    ) -> bool:
        if self.mailer is None:
            logger.warning(
                f"SMTP not configured, email '{subject}' to {', '.join(recipients)} not sent")
            return False

        message = self.mailer.build_message(
            sender=settings.EMAIL_SENDER,
            recipients=recipients,
            subject=subject,
            text_body=self._strip_html_tags(html_body),
            html_body=html_body,
            attachments=attachments,
        )
        return self.mailer.send(message)

    @staticmethod
    def _strip_html_tags(html: str) -> str:
        """Basic HTML to plain text converter."""
        return re.sub("<.*?>", "", html or "")
