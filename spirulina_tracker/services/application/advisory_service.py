"""
Application service: Advisory gateway in front of the generative-text backend.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from spirulina_tracker.domain.models import ParameterLog, Pond
from spirulina_tracker.infrastructure.advisor_client import AdvisorBackend, AdvisorError
from spirulina_tracker.infrastructure.storage import utc_now
from spirulina_tracker.services.domain.advisory_context import build_context

logger = logging.getLogger(__name__)


NOT_CONFIGURED_REPLY = "Error: API key not configured. Please check your environment."
SERVICE_ERROR_REPLY = (
    "Sorry, there was an error consulting the virtual expert. Check your connection."
)
EMPTY_REPLY = "I could not generate a response. Please try again."


@dataclass
class AdvisorReply:
    """Text handed back to the user, with the fallback reason if one was used."""
    text: str
    fallback: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)


class AdvisoryGateway:
    """
    Forwards a question plus a summary of the user's data to the advisor.

    Service problems never propagate: the caller always receives a reply,
    falling back to a fixed message when the backend is unusable.
    """

    def __init__(
        self,
        backend: AdvisorBackend,
        configured: bool = True,
        recent_log_count: int = 3,
    ):
        """
        Initialize the gateway.

        Args:
            backend: Object answering (question, context) with text
            configured: False when no API key is available
            recent_log_count: Logs per pond included in the context
        """
        self.backend = backend
        self.configured = configured
        self.recent_log_count = recent_log_count

    async def ask(
        self,
        question: str,
        ponds: Sequence[Pond],
        logs: Sequence[ParameterLog],
    ) -> AdvisorReply:
        if not self.configured:
            logger.warning("Advisor question received but no API key is configured")
            return AdvisorReply(text=NOT_CONFIGURED_REPLY, fallback="not_configured")

        context = build_context(ponds, logs, recent_count=self.recent_log_count)
        try:
            text = await self.backend.answer(question, context)
        except AdvisorError as e:
            logger.error(f"Advisor API error: {e.message}")
            return AdvisorReply(text=SERVICE_ERROR_REPLY, fallback="service_error")
        except Exception as e:
            logger.exception(f"Unexpected advisor failure: {str(e)}")
            return AdvisorReply(text=SERVICE_ERROR_REPLY, fallback="service_error")

        if not text:
            return AdvisorReply(text=EMPTY_REPLY, fallback="empty_reply")
        return AdvisorReply(text=text)
