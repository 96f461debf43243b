"""
Jinja2 rendering for transactional emails.

Templates live in ``dialoom/templates``; every render receives the common
brand context.
"""

from datetime import date, datetime, time
from decimal import Decimal
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader

from ..core.config import settings
from ..core.constants import BRAND_NAME

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

_CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£"}


def currency(value: Union[Decimal, float, int, None], code: str = "EUR") -> str:
    """Format a number as currency."""
    amount = Decimal(str(value or 0))
    symbol = _CURRENCY_SYMBOLS.get((code or "").upper())
    if symbol:
        return f"{symbol}{amount:,.2f}"
    return f"{amount:,.2f} {code}"


def format_date(value: Union[date, str], format_str: str = "%B %d, %Y") -> str:
    if isinstance(value, str):
        return value  # Already formatted
    return value.strftime(format_str)


def format_time(value: Union[time, datetime, str], format_str: str = "%H:%M") -> str:
    if isinstance(value, str):
        return value  # Already formatted
    return value.strftime(format_str)


class TemplateService:
    """Render email templates with the shared Jinja2 environment."""

    def __init__(self, template_dir: Optional[Path] = None):
        self.env = Environment(
            loader=FileSystemLoader(template_dir or TEMPLATE_DIR),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["currency"] = currency
        self.env.filters["format_date"] = format_date
        self.env.filters["format_time"] = format_time

    def get_common_context(self) -> Dict[str, Any]:
        return {
            "brand_name": BRAND_NAME,
            "current_year": datetime.now().year,
            "support_email": settings.from_email,
        }

    def render_template(self, template_name: str, **context: Any) -> str:
        return self.env.get_template(template_name).render(
            **{**self.get_common_context(), **context}
        )
