"""
SendGrid email service.

Sends quotes to customers, optionally with the quote PDF attached.
Falls back to logging in development when no API key is set.
"""

import base64
import html
import logging
from typing import Any, Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import (
    Attachment,
    Disposition,
    Email,
    FileContent,
    FileName,
    FileType,
    HtmlContent,
    Mail,
    To,
)

from app.config import get_settings
from app.services.date_utils import format_currency

logger = logging.getLogger(__name__)


class EmailService:
    """
    Email service using SendGrid.

    If sendgrid_api_key is empty, emails are logged but not sent,
    allowing local development without a real API key.
    """

    def __init__(self):
        settings = get_settings()
        self.api_key = settings.sendgrid_api_key
        self.from_email = settings.sendgrid_from_email
        self.from_name = settings.sendgrid_from_name
        self.company_name = settings.company_name
        self._client = None

    @property
    def client(self) -> SendGridAPIClient | None:
        """Lazy-init SendGrid client."""
        if self._client is None and self.api_key:
            self._client = SendGridAPIClient(api_key=self.api_key)
        return self._client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    # ------------------------------------------------------------------
    # Generic sender
    # ------------------------------------------------------------------

    def send_generic(
        self,
        to: str,
        subject: str,
        html_content: str,
        cc: Optional[list[str]] = None,
        attachment: Optional[tuple[str, bytes]] = None,
    ) -> bool:
        """
        Send an email.

        Args:
            to: Recipient email address.
            subject: Email subject line.
            html_content: HTML body of the email.
            cc: Optional CC addresses.
            attachment: Optional (filename, pdf bytes).

        Returns:
            True if the email was sent (or simulated) successfully.
        """
        if not self.is_configured:
            logger.warning(
                "SendGrid API key not configured, simulating email send. To=%s Subject=%s",
                to,
                subject,
            )
            return True

        message = Mail(
            from_email=Email(self.from_email, self.from_name),
            to_emails=To(to),
            subject=subject,
            html_content=HtmlContent(html_content),
        )
        for address in cc or []:
            message.add_cc(address)

        if attachment is not None:
            filename, content = attachment
            message.attachment = Attachment(
                FileContent(base64.b64encode(content).decode()),
                FileName(filename),
                FileType("application/pdf"),
                Disposition("attachment"),
            )

        try:
            response = self.client.send(message)
            logger.info(
                "Email sent via SendGrid. to=%s subject=%s status=%s",
                to,
                subject,
                response.status_code,
            )
            return True
        except Exception as exc:
            logger.error(
                "Failed to send email via SendGrid. to=%s subject=%s error=%s",
                to,
                subject,
                exc,
            )
            return False

    # ------------------------------------------------------------------
    # Quote email
    # ------------------------------------------------------------------

    def send_quote(
        self,
        quote: Any,
        to: str,
        client_name: str,
        totals: Any,
        message: str = "",
        cc: Optional[list[str]] = None,
        pdf_bytes: Optional[bytes] = None,
    ) -> bool:
        """Send a quote to a customer, with the PDF attached when provided."""
        number = quote.quote_number or str(quote.id)[:8]
        subject = f"Quote #{number} from {self.company_name}"

        html_content = _build_quote_html(
            quote=quote,
            client_name=client_name,
            totals=totals,
            message=message,
            company_name=self.company_name,
        )

        attachment = (f"quote-{number}.pdf", pdf_bytes) if pdf_bytes else None
        return self.send_generic(to, subject, html_content, cc=cc, attachment=attachment)


# ======================================================================
# Private helpers
# ======================================================================


def _build_quote_html(
    quote: Any,
    client_name: str,
    totals: Any,
    message: str,
    company_name: str,
) -> str:
    """Build the HTML body for a quote email."""
    message_section = ""
    if message:
        message_section = f'<p style="color:#525252;">{_escape(message)}</p>'

    number = _escape(quote.quote_number or "")
    description = _escape(quote.description or "")

    return f"""
    <div style="font-family:Arial,sans-serif;max-width:600px;margin:0 auto;">
        <h2 style="color:#171717;">Quote #{number}</h2>
        <p>Hello {_escape(client_name)},</p>
        {message_section}
        <p style="color:#525252;">{description}</p>
        <table style="width:100%;border-collapse:collapse;">
            <tr>
                <td style="padding:8px 12px;border-bottom:1px solid #eee;">Monthly recurring</td>
                <td style="padding:8px 12px;border-bottom:1px solid #eee;text-align:right;">
                    {format_currency(totals.mrc_total)}
                </td>
            </tr>
            <tr>
                <td style="padding:8px 12px;border-bottom:1px solid #eee;">One-time</td>
                <td style="padding:8px 12px;border-bottom:1px solid #eee;text-align:right;">
                    {format_currency(totals.nrc_total)}
                </td>
            </tr>
            <tr>
                <td style="padding:8px 12px;font-weight:600;">Total</td>
                <td style="padding:8px 12px;font-weight:600;text-align:right;">
                    {format_currency(totals.total_amount)}
                </td>
            </tr>
        </table>
        <p style="color:#a3a3a3;font-size:12px;margin-top:24px;">{_escape(company_name)}</p>
    </div>
    """


def _escape(value: Any) -> str:
    return html.escape(str(value)) if value is not None else ""
