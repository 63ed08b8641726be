# =============================================================================
# Event Parser - Classify Lambda Events
# =============================================================================
# Decides which dispatch protocol handles an event:
#   1. "event" field present                    -> listener
#   2. "httpMethod" and "resource" present      -> HTTP
#   3. any pattern listener registered          -> listener
#   4. otherwise                                -> HTTP
# Source detection (s3, sqs, eventbridge, ...) is informational only.
# =============================================================================

import logging
import uuid
from typing import Any, Dict, Optional

from src.runtime.cors import get_origin
from src.runtime.envelope import Envelope, EnvelopeKind

logger = logging.getLogger(__name__)

EVENT_NAME_FIELD = "event"
HTTP_METHOD_FIELD = "httpMethod"
RESOURCE_FIELD = "resource"

STAGES = ("dev", "qa", "staging", "prod")
DEFAULT_STAGE = "dev"


class EventSource:
    """Event source identifiers."""
    API_GATEWAY = "api_gateway"
    LISTENER = "listener"
    SQS = "sqs"
    SNS = "sns"
    S3 = "s3"
    DYNAMODB = "dynamodb"
    EVENTBRIDGE = "eventbridge"
    COGNITO = "cognito"
    BEDROCK_AGENT = "bedrock_agent"
    UNKNOWN = "unknown"


_RECORD_SOURCES = {
    "aws:sqs": EventSource.SQS,
    "aws:sns": EventSource.SNS,
    "aws:s3": EventSource.S3,
    "aws:dynamodb": EventSource.DYNAMODB,
}


def detect_event_source(event: Any) -> str:
    """
    Detect the source of a Lambda event.

    Returns one of the EventSource values.
    """
    if not isinstance(event, dict) or not event:
        return EventSource.UNKNOWN

    if event.get(EVENT_NAME_FIELD):
        return EventSource.LISTENER

    if HTTP_METHOD_FIELD in event or "requestContext" in event:
        return EventSource.API_GATEWAY

    records = event.get("Records")
    if isinstance(records, list) and records and isinstance(records[0], dict):
        first = records[0]
        source = first.get("eventSource") or first.get("EventSource") or ""
        if source in _RECORD_SOURCES:
            return _RECORD_SOURCES[source]
        if "Sns" in first:
            return EventSource.SNS

    if "detail-type" in event and "source" in event:
        return EventSource.EVENTBRIDGE

    if "triggerSource" in event and "userPoolId" in event:
        return EventSource.COGNITO

    if "actionGroup" in event and "messageVersion" in event:
        return EventSource.BEDROCK_AGENT

    return EventSource.UNKNOWN


def classify_event(event: Any, has_pattern_listeners: bool) -> EnvelopeKind:
    """Pick the dispatch protocol for an event."""
    if isinstance(event, dict):
        if event.get(EVENT_NAME_FIELD):
            return EnvelopeKind.LISTENER_EVENT
        if event.get(HTTP_METHOD_FIELD) and event.get(RESOURCE_FIELD):
            return EnvelopeKind.HTTP_REQUEST

    if has_pattern_listeners:
        return EnvelopeKind.LISTENER_EVENT

    return EnvelopeKind.HTTP_REQUEST


def stage_from_context(context: Any) -> str:
    """
    Deployment stage from the invoked function ARN.

    arn:aws:lambda:us-east-1:123:function:orders:prod -> "prod"
    Unknown aliases and missing contexts fall back to "dev".
    """
    arn = getattr(context, "invoked_function_arn", None)
    if not isinstance(arn, str) or not arn:
        return DEFAULT_STAGE
    stage = arn.split(":")[-1]
    return stage if stage in STAGES else DEFAULT_STAGE


def request_id_for(event: Any, context: Any) -> str:
    """Lambda request id, else API Gateway request id, else a new uuid."""
    aws_request_id = getattr(context, "aws_request_id", None)
    if aws_request_id:
        return str(aws_request_id)

    if isinstance(event, dict):
        request_context = event.get("requestContext")
        if isinstance(request_context, dict) and request_context.get("requestId"):
            return str(request_context["requestId"])

    return str(uuid.uuid4())


def parse_event(event: Any, context: Any = None, has_pattern_listeners: bool = False) -> Envelope:
    """Classify an event and collect the fields used for routing."""
    kind = classify_event(event, has_pattern_listeners)
    fields: Dict[str, Any] = event if isinstance(event, dict) else {}

    event_name = fields.get(EVENT_NAME_FIELD)
    return Envelope(
        kind=kind,
        request_id=request_id_for(event, context),
        source=detect_event_source(event),
        raw_event=event,
        stage=stage_from_context(context),
        event_name=str(event_name) if event_name else None,
        http_method=_opt_str(fields.get(HTTP_METHOD_FIELD)),
        resource=_opt_str(fields.get(RESOURCE_FIELD)),
        origin=get_origin(event),
    )


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None
