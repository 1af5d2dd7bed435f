"""Parsing of "object created" notification payloads."""

import json
from typing import Any, Dict, List, Optional
from urllib.parse import unquote_plus

from pydantic import ValidationError

from .exceptions import MalformedEventError
from .models import SourceCreatedNotification
from .naming import object_url


def _is_created_event(event_name: Optional[str]) -> bool:
    # S3 uses "ObjectCreated:Put", EventBridge "Object Created", Event Grid "Microsoft.Storage.BlobCreated"
    if not event_name:
        return True
    compact = event_name.replace(" ", "").lower()
    return "objectcreated" in compact or "blobcreated" in compact


def _from_s3_record(record: Dict[str, Any]) -> Optional[SourceCreatedNotification]:
    if not _is_created_event(record.get("eventName")):
        return None
    try:
        bucket = record["s3"]["bucket"]["name"]
        key = record["s3"]["object"]["key"]
    except (KeyError, TypeError) as exc:
        raise MalformedEventError(f"S3 record is missing bucket or key: {exc}") from exc
    if not isinstance(bucket, str) or not isinstance(key, str) or not bucket or not key:
        raise MalformedEventError("S3 record has an empty or non-string bucket or key")

    # S3 notification keys are form-encoded ("my+photo.jpg")
    return SourceCreatedNotification(
        url=object_url(bucket, unquote_plus(key)),
        event_time=record.get("eventTime"),
        event_id=(record.get("responseElements") or {}).get("x-amz-request-id"),
    )


def _from_eventbridge(event: Dict[str, Any]) -> Optional[SourceCreatedNotification]:
    if not _is_created_event(event.get("detail-type")):
        return None
    detail = event.get("detail") or {}
    try:
        bucket = detail["bucket"]["name"]
        key = detail["object"]["key"]
    except (KeyError, TypeError) as exc:
        raise MalformedEventError(f"EventBridge event is missing bucket or key: {exc}") from exc
    if not isinstance(bucket, str) or not isinstance(key, str) or not bucket or not key:
        raise MalformedEventError("EventBridge event has an empty or non-string bucket or key")

    return SourceCreatedNotification(
        url=object_url(bucket, key),
        event_id=event.get("id"),
        event_time=event.get("time"),
    )


def _from_event_grid(event: Dict[str, Any]) -> Optional[SourceCreatedNotification]:
    if not _is_created_event(event.get("eventType")):
        return None
    data = event.get("data")
    if isinstance(data, str):
        data = _load_json(data)
    url = data.get("url") if isinstance(data, dict) else None
    if not isinstance(url, str) or not url:
        raise MalformedEventError("Event data does not carry an object url")

    return SourceCreatedNotification(
        url=url, event_id=event.get("id"), event_time=event.get("eventTime")
    )


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise MalformedEventError(f"Notification is not valid JSON: {exc}") from exc


def _parse_event(event: Any) -> List[SourceCreatedNotification]:
    if not isinstance(event, dict):
        raise MalformedEventError(f"Unexpected notification type: {type(event).__name__}")

    if event.get("Event") == "s3:TestEvent":
        return []

    if "Records" in event:
        records = event["Records"]
        if not isinstance(records, list):
            raise MalformedEventError("'Records' must be a list")
        parsed = []
        for record in records:
            if not isinstance(record, dict):
                raise MalformedEventError("S3 record must be an object")
            if "s3" not in record and "body" in record:
                # S3 notification delivered through SQS
                parsed.extend(parse_notifications(record["body"]))
                continue
            notification = _from_s3_record(record)
            if notification is not None:
                parsed.append(notification)
        return parsed

    if "detail" in event and "detail-type" in event:
        notification = _from_eventbridge(event)
    elif "data" in event:
        notification = _from_event_grid(event)
    else:
        raise MalformedEventError("Notification has no recognizable object reference")
    return [notification] if notification is not None else []


def _parse_one(event: Any) -> List[SourceCreatedNotification]:
    try:
        return _parse_event(event)
    except ValidationError as exc:
        # e.g. a numeric event id or a non-string event time
        raise MalformedEventError(f"Notification fields have unexpected types: {exc}") from exc


def parse_notifications(payload: Any) -> List[SourceCreatedNotification]:
    """
    Extract every "object created" notification from a trigger payload.

    Accepts S3 event notifications (also wrapped in SQS messages),
    EventBridge "Object Created" events and Event Grid style events with a
    ``data.url``, as a dict, a list of dicts or a JSON string. Records for
    other event types are skipped.

    Raises:
        MalformedEventError: If the payload cannot be interpreted at all
    """
    if isinstance(payload, (str, bytes)):
        payload = _load_json(payload)

    if isinstance(payload, list):
        notifications = []
        for event in payload:
            notifications.extend(_parse_one(event))
        return notifications

    return _parse_one(payload)
