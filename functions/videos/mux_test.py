# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

import hashlib
import hmac
import json
import unittest
from unittest.mock import patch

import requests

from shared.errors import TranscoderError
from videos import mux


def _response(status_code: int, payload: dict | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = "https://api.mux.com/video/v1/assets"
    if payload is not None:
        response._content = json.dumps(payload).encode("utf-8")
    else:
        response._content = b""
    return response


class MuxClientTest(unittest.TestCase):

    def setUp(self):
        self.client = mux.MuxClient(token_id="id", token_secret="secret")

    def test_session_uses_basic_auth(self):
        self.assertEqual(self.client._session.auth, ("id", "secret"))

    def test_create_asset(self):
        asset = {
            "id": "asset-1",
            "status": "preparing",
            "playback_ids": [{"id": "play-1", "policy": "public"}],
        }
        with patch.object(
            self.client._session, "request", return_value=_response(201, {"data": asset})
        ) as mock_request:
            result = self.client.create_asset(
                "https://storage.googleapis.com/meteor-videos/masters/u/v", "v"
            )

        self.assertEqual(result, asset)
        mock_request.assert_called_once_with(
            "POST",
            "https://api.mux.com/video/v1/assets",
            timeout=mux.REQUEST_TIMEOUT,
            json={
                "input": "https://storage.googleapis.com/meteor-videos/masters/u/v",
                "playback_policy": ["public"],
                "passthrough": "v",
            },
        )

    def test_create_asset_http_error(self):
        with patch.object(
            self.client._session, "request", return_value=_response(401, {"error": {}})
        ):
            with self.assertRaises(TranscoderError):
                self.client.create_asset("https://example.test/v", "v")

    def test_create_asset_connection_error(self):
        with patch.object(
            self.client._session,
            "request",
            side_effect=requests.ConnectionError("down"),
        ):
            with self.assertRaises(TranscoderError):
                self.client.create_asset("https://example.test/v", "v")

    def test_delete_asset(self):
        with patch.object(
            self.client._session, "request", return_value=_response(204)
        ) as mock_request:
            self.client.delete_asset("asset-1")

        mock_request.assert_called_once_with(
            "DELETE",
            "https://api.mux.com/video/v1/assets/asset-1",
            timeout=mux.REQUEST_TIMEOUT,
        )

    def test_delete_missing_asset_is_ignored(self):
        with patch.object(self.client._session, "request", return_value=_response(404)):
            self.client.delete_asset("asset-1")

    def test_delete_asset_server_error(self):
        with patch.object(self.client._session, "request", return_value=_response(500)):
            with self.assertRaises(TranscoderError):
                self.client.delete_asset("asset-1")


class PlaybackIdTest(unittest.TestCase):

    def test_first_public_playback_id(self):
        asset = {
            "playback_ids": [
                {"id": "signed-1", "policy": "signed"},
                {"id": "public-1", "policy": "public"},
            ]
        }
        self.assertEqual(mux.first_public_playback_id(asset), "public-1")

    def test_no_playback_ids(self):
        self.assertIsNone(mux.first_public_playback_id({}))
        self.assertIsNone(mux.first_public_playback_id({"playback_ids": None}))


class WebhookSignatureTest(unittest.TestCase):

    def _header(self, body: bytes, timestamp: int, secret: str = "secret") -> str:
        digest = hmac.new(
            secret.encode("utf-8"), f"{timestamp}.".encode("utf-8") + body, hashlib.sha256
        ).hexdigest()
        return f"t={timestamp},v1={digest}"

    def test_valid_signature(self):
        body = b'{"type": "video.asset.ready"}'
        header = self._header(body, 1000)
        self.assertTrue(
            mux.verify_webhook_signature(body, header, "secret", 300, now=1100)
        )

    def test_tampered_body(self):
        header = self._header(b"{}", 1000)
        self.assertFalse(
            mux.verify_webhook_signature(b'{"x": 1}', header, "secret", 300, now=1000)
        )

    def test_expired_timestamp(self):
        body = b"{}"
        header = self._header(body, 1000)
        self.assertFalse(
            mux.verify_webhook_signature(body, header, "secret", 300, now=1301)
        )

    def test_malformed_headers(self):
        for header in (None, "", "v1=abc", "t=abc,v1=def", "garbage"):
            with self.subTest(header=header):
                self.assertFalse(
                    mux.verify_webhook_signature(b"{}", header, "secret", 300, now=0)
                )


class InMemoryTranscoderClientTest(unittest.TestCase):

    def test_create_and_delete(self):
        client = mux.InMemoryTranscoderClient()
        asset = client.create_asset("https://example.test/v", "v")
        self.assertEqual(mux.first_public_playback_id(asset), "playback-asset-1")
        client.delete_asset(asset["id"])
        client.delete_asset(asset["id"])
        self.assertEqual(client.assets, {})


if __name__ == "__main__":
    unittest.main()
