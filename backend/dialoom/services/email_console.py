import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ConsoleEmailService:
    """Logs outgoing emails instead of delivering them (local and test setups)."""

    def __init__(self, *_: Any, **__: Any) -> None:
        self.sent: list[Dict[str, str]] = []

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        self.sent.append({"to": to_email, "subject": subject})
        logger.info("[console email] to=%s subject=%s", to_email, subject)
        return {"id": None, "provider": "console"}
