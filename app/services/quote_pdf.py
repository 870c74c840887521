"""
Quote PDF generation service.
Uses Jinja2 for HTML templating + WeasyPrint for PDF conversion.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo

from jinja2 import Environment, FileSystemLoader

from app.config import get_settings
from app.models.quote import Quote, QuoteItem
from app.services.date_utils import format_currency, format_date_for_display
from app.services.quote_totals import calculate_totals_by_charge_type


logger = logging.getLogger(__name__)

# Template directory
TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


def _get_jinja_env() -> Environment:
    """Create Jinja2 environment with the templates directory."""
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )


def _line_name(line: QuoteItem) -> str:
    return line.item.name if line.item is not None else "Item"


def _line_description(line: QuoteItem) -> str:
    return (line.item.description or "") if line.item is not None else ""


def render_quote_html(
    quote: Quote,
    lines: list[QuoteItem],
    tz: ZoneInfo,
    company_name: str,
    client_name: Optional[str] = None,
    agent_name: Optional[str] = None,
) -> str:
    """
    Render quote HTML from the Jinja2 template.

    Args:
        quote: The Quote model
        lines: Quote lines, with their catalog item loaded
        tz: Timezone used for displayed dates
        company_name: Issuer name printed in the header
        client_name: End customer company name
        agent_name: Agent the quote is written for

    Returns:
        HTML string ready for PDF conversion or preview
    """
    env = _get_jinja_env()
    template = env.get_template("quote.html")

    totals = calculate_totals_by_charge_type(lines)

    context = {
        "quote": quote,
        "mrc_lines": [line for line in lines if line.charge_type == "MRC"],
        "nrc_lines": [line for line in lines if line.charge_type == "NRC"],
        "totals": totals,
        "company_name": company_name,
        "client_name": client_name or "",
        "agent_name": agent_name or "",
        # Formatting helpers
        "format_currency": format_currency,
        "format_date": lambda value: format_date_for_display(value, tz),
        "line_name": _line_name,
        "line_description": _line_description,
        "generated_at": format_date_for_display(datetime.now(tz), tz),
    }

    return template.render(**context)


async def generate_pdf_bytes(html: str) -> bytes:
    """
    Convert rendered HTML to PDF bytes.

    WeasyPrint is imported here so the API starts on hosts without its
    native libraries; only PDF endpoints need them.
    """
    try:
        from weasyprint import HTML
    except ImportError:
        raise ImportError(
            "WeasyPrint is required for PDF generation. "
            "Install it with: pip install weasyprint"
        )
    return HTML(string=html).write_pdf()


async def generate_quote_pdf(quote: Quote, lines: list[QuoteItem], tz: ZoneInfo, **kwargs: Any) -> bytes:
    """Render and convert in one step."""
    html = render_quote_html(quote, lines, tz, **kwargs)
    return await generate_pdf_bytes(html)


async def store_quote_pdf(quote: Quote, pdf_bytes: bytes) -> str:
    """
    Upload a rendered quote PDF to Supabase Storage.

    Returns the public URL of the stored PDF.
    """
    from supabase import create_client

    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise ValueError("Supabase credentials not configured for PDF storage")

    client = create_client(settings.supabase_url, settings.supabase_service_role_key)

    # Storage path: quotes/{user_id}/{year}/{number}.pdf
    storage_path = f"quotes/{quote.user_id}/{quote.quote_year or 'undated'}/{quote.quote_number or quote.id}.pdf"

    client.storage.from_(settings.pdf_bucket).upload(
        storage_path,
        pdf_bytes,
        file_options={"content-type": "application/pdf", "upsert": "true"},
    )
    url = client.storage.from_(settings.pdf_bucket).get_public_url(storage_path)
    logger.info("Stored quote PDF %s", storage_path)
    return url
