# src/floatchat/nlp/chat_responder.py
import logging
import itertools
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


class ResponseKind(Enum):
    SALINITY = 'salinity'
    TEMPERATURE = 'temperature'
    BGC = 'bgc'
    LOCATION = 'location'
    FALLBACK = 'fallback'


@dataclass(frozen=True)
class ChatResponse:
    kind: ResponseKind
    content: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return self.kind is not ResponseKind.FALLBACK


@dataclass(frozen=True)
class IntentRule:
    """Keywords that select one canned response"""
    kind: ResponseKind
    keywords: Tuple[str, ...]
    content: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def matches(self, lowered_query: str) -> bool:
        return any(keyword in lowered_query for keyword in self.keywords)


GREETING = (
    "Hello! I'm your Indian Ocean ARGO data assistant. I can help you explore temperature, salinity, "
    "and biogeochemical data from over 240 active floats in the Indian Ocean region. Try asking about "
    "specific regions, time periods, or parameters!"
)

FALLBACK_RESPONSE = "I understand your query about ARGO data. Let me process that information for you."

SAMPLE_QUERIES = [
    "Show me salinity profiles near the equator in March 2023",
    "Compare BGC parameters in the Arabian Sea for the last 6 months",
    "What are the nearest ARGO floats to coordinates 25.4°N, 157.8°W?",
    "Display temperature trends in the Pacific Ocean",
    "Find floats with recent oxygen measurements",
]

# First matching rule wins, so order matters: "oxygen" outranks "bgc"
# and both outrank the location keywords.
INTENT_TABLE: List[IntentRule] = [
    IntentRule(
        kind=ResponseKind.SALINITY,
        keywords=('salinity',),
        content=("I found 23 ARGO floats with salinity profiles in the Indian Ocean region. The average "
                 "salinity was 35.2 PSU with variations between 34.8-35.6 PSU. Would you like me to show "
                 "the depth profiles or map locations?"),
        payload={'count': 23, 'avg_value': '35.2 PSU'}
    ),
    IntentRule(
        kind=ResponseKind.TEMPERATURE,
        keywords=('temperature',),
        content=("Temperature data shows a warming trend of 0.3°C over the past decade in the Indian Ocean. "
                 "Current surface temperatures range from 18-28°C depending on latitude. Shall I display "
                 "the temperature-depth profiles?"),
        payload={'trend': '+0.3°C/decade', 'range': '18-28°C'}
    ),
    IntentRule(
        kind=ResponseKind.BGC,
        keywords=('oxygen',),
        content=("Currently tracking 78 floats with oxygen sensors in the Indian Ocean. Recent measurements "
                 "show typical oceanic oxygen minimum zones at 800-1200m depth. Would you like specific "
                 "regional data?"),
        payload={'floats': 78}
    ),
    IntentRule(
        kind=ResponseKind.BGC,
        keywords=('bgc',),
        content=("BGC (Biogeochemical) data from the Arabian Sea shows seasonal variations in oxygen levels "
                 "(180-220 μmol/kg) and chlorophyll concentrations. 6 active BGC floats are currently "
                 "monitoring this region."),
        payload={'floats': 6}
    ),
    IntentRule(
        kind=ResponseKind.LOCATION,
        keywords=('float', 'coordinates', 'location'),
        content=("I found 2 ARGO floats within 100km of those coordinates: Float 2902345 (15.1°N, 73.5°E) "
                 "and Float 2902346 (15.7°N, 74.1°E). Both are active with recent profiles."),
        payload={'floats': 2, 'coordinates': '15.4°N, 73.8°E'}
    ),
]

PAYLOAD_LABELS = {
    'count': 'Floats found',
    'avg_value': 'Average',
    'trend': 'Trend',
    'range': 'Range',
    'floats': 'Active floats',
    'coordinates': 'Near',
}


class ChatResponder:
    """Canned-response rules engine over an ordered intent table"""

    def __init__(self, rules: Optional[List[IntentRule]] = None, fallback: str = FALLBACK_RESPONSE):
        self.rules = list(rules) if rules is not None else list(INTENT_TABLE)
        self.fallback = fallback

    def respond(self, query: str) -> ChatResponse:
        lowered = query.lower()
        for rule in self.rules:
            if rule.matches(lowered):
                logger.debug(f"Query matched {rule.kind.value} rule {rule.keywords}")
                return ChatResponse(kind=rule.kind, content=rule.content, payload=dict(rule.payload))
        return ChatResponse(kind=ResponseKind.FALLBACK, content=self.fallback)

    @staticmethod
    def describe_payload(response: ChatResponse) -> List[str]:
        """Label/value lines shown under a data response"""
        return [f"{PAYLOAD_LABELS.get(key, key)}: {value}" for key, value in response.payload.items()]


@dataclass
class ChatMessage:
    message_id: str
    content: str
    sender: str
    timestamp: datetime
    response: Optional[ChatResponse] = None

    @property
    def is_bot(self) -> bool:
        return self.sender == 'bot'


class ChatSession:
    """Conversation held by the chat view: messages, flags and retries"""

    def __init__(self, responder: Optional[ChatResponder] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.responder = responder or ChatResponder()
        self._clock = clock
        self._ids = itertools.count(1)
        self.flagged: Set[str] = set()
        self.messages: List[ChatMessage] = [
            ChatMessage(message_id=self._next_id(), content=GREETING, sender='bot', timestamp=self._clock())
        ]

    def _next_id(self) -> str:
        return str(next(self._ids))

    @property
    def sample_queries(self) -> List[str]:
        return list(SAMPLE_QUERIES)

    @property
    def is_fresh(self) -> bool:
        """Only the greeting has been shown"""
        return len(self.messages) == 1

    def _reply(self, query: str) -> ChatMessage:
        response = self.responder.respond(query)
        message = ChatMessage(message_id=self._next_id(), content=response.content, sender='bot',
                              timestamp=self._clock(), response=response)
        self.messages.append(message)
        return message

    def send(self, text: str) -> Optional[ChatMessage]:
        """Post a user message and return the bot reply; blank input is ignored"""
        if not text or not text.strip():
            return None

        self.messages.append(
            ChatMessage(message_id=self._next_id(), content=text, sender='user', timestamp=self._clock())
        )
        return self._reply(text)

    def retry(self, bot_message_id: str) -> Optional[ChatMessage]:
        """Answer again the user message preceding a bot message"""
        index = next((i for i, m in enumerate(self.messages) if m.message_id == bot_message_id), None)
        if index is None:
            logger.warning(f"Retry requested for unknown message {bot_message_id}")
            return None

        source = next((m.content for m in reversed(self.messages[:index]) if m.sender == 'user'), None)
        if source is None:
            return None
        return self._reply(source)

    def toggle_flag(self, message_id: str) -> bool:
        """Flag or unflag a message; returns the new flag state"""
        if message_id in self.flagged:
            self.flagged.discard(message_id)
            return False
        self.flagged.add(message_id)
        return True

    def is_flagged(self, message_id: str) -> bool:
        return message_id in self.flagged

    def to_dict(self) -> Dict[str, Any]:
        return {
            'messages': [
                {
                    'message_id': m.message_id,
                    'content': m.content,
                    'sender': m.sender,
                    'timestamp': m.timestamp,
                    'kind': m.response.kind.value if m.response else None,
                    'payload': dict(m.response.payload) if m.response else None,
                }
                for m in self.messages
            ],
            'flagged': sorted(self.flagged),
        }
