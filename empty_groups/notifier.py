"""
Email notification of scan results through the Gmail API.
"""

import base64
import logging
from email.mime.text import MIMEText

from empty_groups.config import DEFAULT_BODY_TEMPLATE, DEFAULT_SUBJECT


logger = logging.getLogger(__name__)


class EmailNotifier:
    """Sends the empty group report email. One call sends exactly one message."""

    def __init__(
        self,
        service,
        recipient: str,
        subject: str = DEFAULT_SUBJECT,
        body_template: str = DEFAULT_BODY_TEMPLATE,
    ):
        self.service = service
        self.recipient = recipient
        self.subject = subject
        self.body_template = body_template

    def build_message(self, count: int, domain: str) -> MIMEText:
        msg = MIMEText(self.body_template.format(count=count, domain=domain), 'plain')
        msg['To'] = self.recipient
        msg['Subject'] = self.subject
        return msg

    def send_report(self, count: int, domain: str) -> None:
        """Email the number of empty groups found in the domain."""
        msg = self.build_message(count, domain)
        raw = base64.urlsafe_b64encode(msg.as_bytes()).decode()

        self.service.users().messages().send(userId="me", body={"raw": raw}).execute()
        logger.info(f"Report email sent to {self.recipient} ({count} empty groups in {domain})")
