# =============================================================================
# Envelope - Classified Inbound Event
# =============================================================================
# Wraps one Lambda invocation: the raw event plus what the dispatcher needs to
# route it (kind, event name or verb/resource, caller origin, request id,
# deployment stage). The raw event is passed to handlers untouched.
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class EnvelopeKind(str, Enum):
    """Which dispatch protocol handles the event."""
    HTTP_REQUEST = "http_request"        # API Gateway proxy event
    LISTENER_EVENT = "listener_event"    # named event or structural trigger


@dataclass
class Envelope:
    """
    Attributes:
        kind: Dispatch protocol for this event
        request_id: Correlation id (Lambda request id when available)
        source: Detected trigger source (api_gateway, sqs, s3, ...)
        raw_event: Original event, passed to the handler as-is
        stage: Deployment stage derived from the function ARN
        event_name: Value of the "event" field, if any
        http_method: Verb of an HTTP request
        resource: Resource path template of an HTTP request
        origin: Caller's Origin header
        timestamp: When the envelope was created
    """
    kind: EnvelopeKind
    request_id: str
    source: str
    raw_event: Any
    stage: str = "dev"
    event_name: Optional[str] = None
    http_method: Optional[str] = None
    resource: Optional[str] = None
    origin: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def is_http_request(self) -> bool:
        return self.kind == EnvelopeKind.HTTP_REQUEST

    @property
    def is_listener_event(self) -> bool:
        return self.kind == EnvelopeKind.LISTENER_EVENT

    @property
    def top_level_keys(self) -> List[str]:
        if isinstance(self.raw_event, dict):
            return [str(k) for k in self.raw_event.keys()]
        return []

    def to_dict(self) -> Dict[str, Any]:
        """Summary for logging (raw event omitted)."""
        return {
            "kind": self.kind.value,
            "requestId": self.request_id,
            "source": self.source,
            "stage": self.stage,
            "eventName": self.event_name,
            "httpMethod": self.http_method,
            "resource": self.resource,
            "timestamp": self.timestamp,
        }
