#!/usr/bin/env python3
import hashlib
import hmac
import json
import unittest
from unittest.mock import Mock, patch

from flask import Request

from sentry_mattermost.config import Config
from sentry_mattermost.controller import create_app
from sentry_mattermost.errors import PostFail, TransportError
from sentry_mattermost.mattermost import MattermostClient

SECRET = "sentry-client-secret"

ISSUE_CREATED = {
    "action": "created",
    "installation": {"uuid": "b1e5..."},
    "data": {
        "issue": {
            "id": "1170820242",
            "title": "ZeroDivisionError: division by zero",
            "project": {"id": "1", "name": "backend", "slug": "backend"},
            "lastSeen": "2025-10-08T14:33:30.000000Z",
            "level": "error",
        }
    },
}


def sign(body, secret=SECRET):
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


class AlertEndpointTestCase(unittest.TestCase):
    def setUp(self):
        self.config = Config(
            sentry_secret=SECRET,
            mattermost_base_url="https://chat.example.com",
            mattermost_token="tok",
            mattermost_channel_id="chan-id",
            bind="127.0.0.1:8080",
        )
        self.notifier = Mock(spec=MattermostClient)
        self.app = create_app(self.config, notifier=self.notifier)
        self.client = self.app.test_client()

    def post_alert(self, payload, signature=None, raw=None):
        body = raw if raw is not None else json.dumps(payload).encode()
        headers = {}
        if signature is not False:
            headers["sentry-hook-signature"] = signature or sign(body)
        return self.client.post("/alert", data=body, headers=headers, content_type="application/json")

    def test_issue_created_sends_one_post(self):
        with self.assertLogs("sentry_mattermost.controller", level="DEBUG"):
            resp = self.post_alert(ISSUE_CREATED)

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_data(as_text=True), "Ok")
        self.notifier.create_post.assert_called_once_with(
            "chan-id",
            "backend: issue `ZeroDivisionError: division by zero` created at 2025-10-08T14:33:30.000000Z (error)",
        )

    def test_invalid_signature_is_server_error(self):
        resp = self.post_alert(ISSUE_CREATED, signature="0" * 64)

        self.assertEqual(resp.status_code, 500)
        self.notifier.create_post.assert_not_called()

    def test_missing_signature_is_server_error(self):
        with self.assertLogs("sentry_mattermost.controller", level="ERROR") as logs:
            resp = self.post_alert(ISSUE_CREATED, signature=False)

        self.assertEqual(resp.status_code, 500)
        self.assertIn("sentry-hook-signature", "\n".join(logs.output))
        self.notifier.create_post.assert_not_called()

    def test_deeply_nested_json_is_bad_request(self):
        raw = b"[" * 100000 + b"]" * 100000

        with self.assertLogs("sentry_mattermost.controller", level="ERROR"):
            resp = self.post_alert(None, raw=raw)

        self.assertEqual(resp.status_code, 400)
        self.notifier.create_post.assert_not_called()

    def test_body_read_failure_is_server_error(self):
        with patch.object(Request, "get_data", side_effect=OSError("connection reset by peer")):
            with self.assertLogs("sentry_mattermost.controller", level="ERROR") as logs:
                resp = self.post_alert(ISSUE_CREATED)

        self.assertEqual(resp.status_code, 500)
        self.assertIn("connection reset by peer", "\n".join(logs.output))
        self.notifier.create_post.assert_not_called()

    def test_non_ascii_signature_is_server_error(self):
        with self.assertLogs("sentry_mattermost.controller", level="ERROR") as logs:
            resp = self.post_alert(ISSUE_CREATED, signature="assinaturaé")

        self.assertEqual(resp.status_code, 500)
        self.assertIn("failed to convert field sentry-hook-signature", "\n".join(logs.output))
        self.notifier.create_post.assert_not_called()

    def test_invalid_json_is_bad_request(self):
        raw = b"{not json"
        resp = self.post_alert(None, raw=raw)

        self.assertEqual(resp.status_code, 400)
        self.notifier.create_post.assert_not_called()

    def test_unknown_action_is_acknowledged(self):
        with self.assertLogs("sentry_mattermost.controller", level="WARNING"):
            resp = self.post_alert({"action": "resolved", "data": {"issue": {}}})

        self.assertEqual(resp.status_code, 200)
        self.notifier.create_post.assert_not_called()

    def test_incomplete_issue_is_acknowledged(self):
        payload = json.loads(json.dumps(ISSUE_CREATED))
        del payload["data"]["issue"]["title"]

        with self.assertLogs("sentry_mattermost.controller", level="ERROR") as logs:
            resp = self.post_alert(payload)

        self.assertEqual(resp.status_code, 200)
        self.assertIn("issue::title", "\n".join(logs.output))
        self.notifier.create_post.assert_not_called()

    def test_notify_failures_do_not_change_response(self):
        for error in (PostFail(403, "forbidden"), TransportError("timed out")):
            self.notifier.create_post.reset_mock()
            self.notifier.create_post.side_effect = error

            with self.assertLogs("sentry_mattermost.controller", level="ERROR"):
                resp = self.post_alert(ISSUE_CREATED)

            self.assertEqual(resp.status_code, 200)
            self.notifier.create_post.assert_called_once()

    def test_unknown_route_is_bad_request(self):
        with self.assertLogs("sentry_mattermost.controller", level="WARNING") as logs:
            resp = self.client.get("/anything-else")

        self.assertEqual(resp.status_code, 400)
        self.assertIn("/anything-else", "\n".join(logs.output))
        self.notifier.create_post.assert_not_called()

    def test_wrong_method_on_alert_is_bad_request(self):
        for method in (self.client.get, self.client.put, self.client.options):
            resp = method("/alert")
            self.assertEqual(resp.status_code, 400)
        self.notifier.create_post.assert_not_called()


class CreateAppTestCase(unittest.TestCase):
    def setUp(self):
        self.config = Config(
            sentry_secret=SECRET,
            mattermost_base_url="https://chat.example.com",
            mattermost_token="tok",
            mattermost_channel_id="chan-id",
            bind="127.0.0.1:8080",
            notify_timeout=3.0,
            verify_tls=False,
        )

    @patch("sentry_mattermost.controller.MattermostClient")
    def test_builds_client_from_config(self, mock_client_cls):
        app = create_app(self.config)

        self.assertIs(app.config["BRIDGE_CONFIG"], self.config)
        mock_client_cls.assert_called_once_with(
            "https://chat.example.com",
            "tok",
            timeout=3.0,
            verify_tls=False,
        )

    @patch("sentry_mattermost.mattermost.requests.request")
    def test_timeout_reaches_outbound_request(self, mock_request):
        mock_request.return_value = Mock(status_code=201, headers={}, json=Mock(return_value={"id": "p1"}))
        client = create_app(self.config).test_client()
        body = json.dumps(ISSUE_CREATED).encode()

        resp = client.post("/alert", data=body, headers={"sentry-hook-signature": sign(body)})

        self.assertEqual(resp.status_code, 200)
        kwargs = mock_request.call_args.kwargs
        self.assertEqual(kwargs["timeout"], 3.0)
        self.assertFalse(kwargs["verify"])


if __name__ == '__main__':
    unittest.main()
