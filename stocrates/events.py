from __future__ import annotations

import logging
import re
from typing import Iterable, List, Mapping, Optional

import requests

from .models import DetectedEvent
from .ratelimit import MinIntervalLimiter

logger = logging.getLogger(__name__)

GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"

EVENT_TYPES = {
    "earnings": ("Earnings Report", "📊"),
    "war": ("Geopolitical Event", "⚔️"),
    "contract": ("Business Contract", "🤝"),
    "fda_approval": ("FDA Approval", "💊"),
    "merger": ("Merger & Acquisition", "🔗"),
    "lawsuit": ("Legal Issue", "⚖️"),
    "product_launch": ("Product Launch", "🚀"),
    "executive_change": ("Executive Change", "👔"),
    "economic_data": ("Economic Data", "📈"),
    "other": ("Other Event", "📰"),
}

_PROMPT = """Analyze this news headline and categorize the event type.

Headline: {headline}
{content}
Event Categories:
- earnings: Quarterly/annual earnings reports, revenue announcements, profit/loss statements
- war: Military conflicts, geopolitical tensions, sanctions, international disputes
- contract: Major business contracts, deals, partnerships, government contracts
- fda_approval: FDA approvals, drug trials, medical device approvals, clinical trial results
- merger: Mergers, acquisitions, buyouts, takeovers
- lawsuit: Legal issues, lawsuits, regulatory investigations, settlements
- product_launch: New product announcements, product releases, service launches
- executive_change: CEO changes, leadership transitions, board appointments
- economic_data: Economic indicators, Fed decisions, interest rates, inflation data, GDP
- other: Events that don't fit the above categories

Respond in this exact format:
TYPE: [category name]
CONFIDENCE: [0-100]
REASONING: [brief explanation]"""

_TYPE_RE = re.compile(r"TYPE:\s*(\w+)", re.IGNORECASE)
_CONFIDENCE_RE = re.compile(r"CONFIDENCE:\s*(\d+)", re.IGNORECASE)
_REASONING_RE = re.compile(r"REASONING:\s*(.+)", re.IGNORECASE | re.DOTALL)


def parse_event_response(text: str) -> DetectedEvent:
    text = (text or "").strip()
    type_match = _TYPE_RE.search(text)
    confidence_match = _CONFIDENCE_RE.search(text)
    reasoning_match = _REASONING_RE.search(text)

    event_type = type_match.group(1).lower() if type_match else "other"
    if event_type not in EVENT_TYPES:
        event_type = "other"
    confidence = int(confidence_match.group(1)) if confidence_match else 50
    reasoning = reasoning_match.group(1).strip() if reasoning_match else "Unable to determine reasoning"
    return DetectedEvent(type=event_type, confidence=max(0, min(100, confidence)), reasoning=reasoning)


def display_name(event_type: str) -> str:
    return EVENT_TYPES.get(event_type, ("Unknown", ""))[0]


def icon(event_type: str) -> str:
    return EVENT_TYPES.get(event_type, ("", "📰"))[1]


class EventDetector:
    """Categorizes market news headlines with a hosted LLM."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "llama-3.3-70b-versatile",
        limiter: Optional[MinIntervalLimiter] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self.limiter = limiter or MinIntervalLimiter(0.1)
        self._session = session or requests.Session()

    def detect(self, headline: str, content: str = "") -> DetectedEvent:
        if not self._api_key:
            logger.warning("GROQ_API_KEY not found, returning default event type")
            return DetectedEvent(type="other", confidence=0, reasoning="API key not configured")

        prompt = _PROMPT.format(
            headline=headline,
            content=f"Content: {content[:500]}\n" if content else "",
        )
        try:
            self.limiter.acquire("groq")
            response = self._session.post(
                GROQ_URL,
                json={
                    "model": self.model,
                    "messages": [{"role": "user", "content": prompt}],
                    "max_tokens": 200,
                },
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=15,
            )
            response.raise_for_status()
            text = response.json()["choices"][0]["message"]["content"]
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("Error detecting event type: %s", exc)
            return DetectedEvent(type="other", confidence=0, reasoning="Error during detection")
        return parse_event_response(text)

    def detect_many(self, items: Iterable[Mapping[str, str]]) -> List[DetectedEvent]:
        return [self.detect(item.get("headline", ""), item.get("content") or "") for item in items]
