import logging
import mimetypes
import smtplib
import time
from email.message import EmailMessage
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# (filename, content) pairs, mime type guessed from the filename
Attachment = Tuple[str, bytes]


class EmailClient:
    """SMTP delivery with a bounded number of attempts."""

    def __init__(self, smtp_host: str, smtp_port: int, username: Optional[str] = None,
                 password: Optional[str] = None, use_ssl: bool = False,
                 attempts: int = 3, backoff_seconds: float = 2.0):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.attempts = max(attempts, 1)
        self.backoff_seconds = backoff_seconds

    def _open(self) -> smtplib.SMTP:
        if self.use_ssl:
            server = smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, timeout=30)
        else:
            server = smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30)
            server.starttls()
        if self.username:
            server.login(self.username, self.password or "")
        return server

    @staticmethod
    def build_message(sender: str, recipients: Sequence[str], subject: str, text_body: str,
                      html_body: Optional[str] = None,
                      attachments: Optional[List[Attachment]] = None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = sender
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.set_content(text_body or "")
        if html_body:
            message.add_alternative(html_body, subtype="html")

        for filename, content in attachments or []:
            mime_type, _ = mimetypes.guess_type(filename)
            maintype, subtype = (mime_type or "application/octet-stream").split("/", 1)
            message.add_attachment(content, maintype=maintype, subtype=subtype, filename=filename)
        return message

    def send(self, message: EmailMessage) -> bool:
        recipients = message["To"]
        for attempt in range(1, self.attempts + 1):
            try:
                with self._open() as server:
                    server.send_message(message)
                logger.info(f"Email '{message['Subject']}' sent to {recipients}")
                return True
            except smtplib.SMTPAuthenticationError as e:
                logger.error(f"SMTP login refused for {self.username}: {e}")
                return False
            except (smtplib.SMTPException, OSError) as e:
                logger.warning(f"Email attempt {attempt}/{self.attempts} to {recipients} failed: {e}")
                if attempt < self.attempts:
                    time.sleep(self.backoff_seconds * attempt)

        logger.error(f"Email '{message['Subject']}' to {recipients} was not delivered")
        return False
