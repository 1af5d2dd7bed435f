"""Tests for notification payload parsing."""

import json

import pytest

from image_variants.core.events import parse_notifications
from image_variants.core.exceptions import MalformedEventError
from image_variants.core.naming import name_for


def s3_event(*keys, bucket="uploads", event_name="ObjectCreated:Put"):
    return {
        "Records": [
            {
                "eventSource": "aws:s3",
                "eventName": event_name,
                "eventTime": "2024-05-01T12:00:00.000Z",
                "responseElements": {"x-amz-request-id": f"req-{i}"},
                "s3": {"bucket": {"name": bucket}, "object": {"key": key, "size": 10}},
            }
            for i, key in enumerate(keys)
        ]
    }


class TestS3Notifications:
    """Tests for S3 event notifications."""

    def test_single_record(self):
        notifications = parse_notifications(s3_event("photos/cat.jpg"))

        assert len(notifications) == 1
        assert notifications[0].url == "s3://uploads/photos/cat.jpg"
        assert notifications[0].event_id == "req-0"
        assert notifications[0].event_time == "2024-05-01T12:00:00.000Z"

    def test_form_encoded_key(self):
        """S3 encodes spaces in keys as '+'."""
        notifications = parse_notifications(s3_event("photos/my+cat%281%29.jpg"))

        assert name_for(notifications[0].url) == "photos/my cat(1).jpg"

    def test_multiple_records_keep_order(self):
        notifications = parse_notifications(s3_event("a.jpg", "b.png", "c.gif"))

        assert [name_for(n.url) for n in notifications] == ["a.jpg", "b.png", "c.gif"]

    def test_non_created_records_are_skipped(self):
        assert parse_notifications(s3_event("a.jpg", event_name="ObjectRemoved:Delete")) == []

    def test_s3_test_event(self):
        payload = {"Service": "Amazon S3", "Event": "s3:TestEvent", "Bucket": "uploads"}
        assert parse_notifications(payload) == []

    def test_json_string_payload(self):
        notifications = parse_notifications(json.dumps(s3_event("photos/cat.jpg")))
        assert notifications[0].url == "s3://uploads/photos/cat.jpg"

    def test_sqs_wrapped_notification(self):
        payload = {"Records": [{"messageId": "m1", "body": json.dumps(s3_event("a.png"))}]}

        notifications = parse_notifications(payload)

        assert [n.url for n in notifications] == ["s3://uploads/a.png"]


class TestOtherNotificationShapes:
    """Tests for EventBridge and Event Grid style payloads."""

    def test_eventbridge(self):
        payload = {
            "id": "evt-1",
            "time": "2024-05-01T12:00:00Z",
            "detail-type": "Object Created",
            "source": "aws.s3",
            "detail": {"bucket": {"name": "uploads"}, "object": {"key": "x/y.gif"}},
        }

        notifications = parse_notifications(payload)

        assert notifications[0].url == "s3://uploads/x/y.gif"
        assert notifications[0].event_id == "evt-1"

    def test_eventbridge_other_type_skipped(self):
        payload = {
            "detail-type": "Object Deleted",
            "detail": {"bucket": {"name": "uploads"}, "object": {"key": "x/y.gif"}},
        }
        assert parse_notifications(payload) == []

    def test_event_grid(self):
        payload = {
            "id": "eg-1",
            "eventType": "Microsoft.Storage.BlobCreated",
            "data": {"url": "https://acct.blob.core.windows.net/images/cat.jpg"},
        }

        notifications = parse_notifications(payload)

        assert notifications[0].url == "https://acct.blob.core.windows.net/images/cat.jpg"
        assert notifications[0].event_id == "eg-1"

    def test_event_grid_data_as_string(self):
        payload = [{"data": json.dumps({"url": "s3://uploads/cat.png"})}]
        assert parse_notifications(payload)[0].url == "s3://uploads/cat.png"


class TestMalformedNotifications:
    """Payloads that cannot be interpreted at all."""

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            42,
            "not json",
            {"foo": "bar"},
            {"Records": "nope"},
            {"Records": ["nope"]},
            {"Records": [{"s3": {}}]},
            {"Records": [{"s3": {"bucket": {"name": ""}, "object": {"key": "a.jpg"}}}]},
            {"data": {}},
            {"data": "{broken"},
            {"detail-type": "Object Created", "detail": {"bucket": {}}},
            [{"foo": "bar"}],
        ],
    )
    def test_malformed(self, payload):
        with pytest.raises(MalformedEventError):
            parse_notifications(payload)

    def test_wrong_typed_event_id(self):
        payload = {
            "id": 42,
            "detail-type": "Object Created",
            "detail": {"bucket": {"name": "uploads"}, "object": {"key": "x/y.gif"}},
        }

        with pytest.raises(MalformedEventError) as excinfo:
            parse_notifications(payload)

        assert excinfo.value.__cause__ is not None

    def test_wrong_typed_event_time_in_s3_record(self):
        payload = s3_event("photos/cat.jpg")
        payload["Records"][0]["eventTime"] = 1714564800

        with pytest.raises(MalformedEventError):
            parse_notifications(payload)

    @pytest.mark.parametrize("bucket,key", [(5, "a.jpg"), ("uploads", 7)])
    def test_non_string_bucket_or_key(self, bucket, key):
        with pytest.raises(MalformedEventError):
            parse_notifications(s3_event(key, bucket=bucket))
