"""Email sending through ``SP.Utilities.Utility.SendEmail``.

SharePoint only delivers to users of the site collection and uses the
site's configured outgoing mail server.
"""

from collections.abc import Sequence

from splist.core.logging import get_logger
from splist.sharepoint.base import SharePointEndpoint
from splist.sharepoint.payload import EntityType, entity
from splist.sharepoint.transport import HttpVerb

logger = get_logger(__name__)


def parse_recipients(to: str | Sequence[str]) -> list[str]:
    """Split a comma-separated recipient string into addresses."""
    items = to.split(",") if isinstance(to, str) else list(to)
    return [address.strip() for address in items if address and address.strip()]


class MailClient(SharePointEndpoint):
    """Client for the SharePoint email utility."""

    async def send_mail(
        self,
        to: str | Sequence[str],
        sender: str,
        subject: str,
        body: str,
    ) -> None:
        """Send an email.

        Args:
            to: Recipients as a comma-separated string or a sequence
            sender: From address
            subject: Subject line
            body: HTML body

        Raises:
            ValueError: If no recipient is given
            SharePointError: For transport or backend failures
        """
        recipients = parse_recipients(to)
        if not recipients:
            raise ValueError("At least one recipient is required")

        payload = {
            "properties": entity(
                EntityType.EMAIL_PROPERTIES,
                To={"results": recipients},
                From=sender,
                Subject=subject,
                Body=body,
            )
        }
        url = f"{self._location.api_url}/SP.Utilities.Utility.SendEmail"

        await self._send(
            HttpVerb.POST,
            url,
            "send email",
            json=payload,
            mutating=True,
        )

        logger.info(
            "sharepoint_mail_sent",
            recipient_count=len(recipients),
            subject=subject[:80],
        )
