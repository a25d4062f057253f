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
"""
Client for the Mux Video API, the remote transcoder.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Protocol

import requests

from shared.errors import TranscoderError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30  # seconds

ASSET_READY_EVENT = "video.asset.ready"
ASSET_ERRORED_EVENT = "video.asset.errored"


class TranscoderClient(Protocol):
    """Defines the transcoder operations used by the video functions."""

    def create_asset(self, input_url: str, passthrough: str) -> dict:
        ...

    def delete_asset(self, asset_id: str) -> None:
        ...


@dataclass
class InMemoryTranscoderClient:
    """Test double that records assets instead of calling Mux."""

    assets: dict[str, dict] = field(default_factory=dict)

    def create_asset(self, input_url: str, passthrough: str) -> dict:
        asset_id = f"asset-{len(self.assets) + 1}"
        asset = {
            "id": asset_id,
            "status": "preparing",
            "passthrough": passthrough,
            "input": input_url,
            "playback_ids": [{"id": f"playback-{asset_id}", "policy": "public"}],
        }
        self.assets[asset_id] = asset
        return asset

    def delete_asset(self, asset_id: str) -> None:
        self.assets.pop(asset_id, None)


@dataclass
class MuxClient:
    """Thin wrapper over the Mux REST API using HTTP basic auth."""

    token_id: str
    token_secret: str
    base_url: str = "https://api.mux.com/video/v1"
    timeout: float = REQUEST_TIMEOUT

    def __post_init__(self):
        self._session = requests.Session()
        self._session.auth = (self.token_id, self.token_secret)

    def create_asset(self, input_url: str, passthrough: str) -> dict:
        """
        Starts a transcoding job for a publicly readable video.

        Args:
            input_url (str): Public URL Mux downloads the master from.
            passthrough (str): Opaque value echoed back in webhook events; the
              video id.

        Returns:
            dict: The created asset (`id`, `status`, `playback_ids`, ...).
        """
        try:
            response = self._request(
                "POST",
                "/assets",
                json={
                    "input": input_url,
                    "playback_policy": ["public"],
                    "passthrough": passthrough,
                },
            )
        except requests.HTTPError as e:
            raise TranscoderError(f"Mux asset creation failed: {e}") from e
        return response.json().get("data", {})

    def delete_asset(self, asset_id: str) -> None:
        try:
            self._request("DELETE", f"/assets/{asset_id}")
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                logger.warning("Mux asset %s already deleted", asset_id)
                return
            raise TranscoderError(f"Mux asset deletion failed: {e}") from e

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.HTTPError:
            raise
        except requests.RequestException as e:
            raise TranscoderError(f"Mux request failed: {e}") from e
        return response


def first_public_playback_id(asset: dict) -> Optional[str]:
    """Returns the first public playback id of an asset, if any."""
    for playback in asset.get("playback_ids") or []:
        if playback.get("policy") == "public":
            return playback.get("id")
    return None


def verify_webhook_signature(
    body: bytes,
    header: Optional[str],
    secret: str,
    tolerance_sec: int,
    now: Optional[float] = None,
) -> bool:
    """
    Checks a `Mux-Signature` header of the form `t=<unix>,v1=<hex>`.

    The signature is an HMAC-SHA256 of `<t>.<body>` keyed by the webhook
    signing secret. Timestamps older than `tolerance_sec` are rejected.
    """
    if not header:
        return False
    parts = dict(
        item.split("=", 1) for item in header.split(",") if "=" in item
    )
    timestamp = parts.get("t")
    signature = parts.get("v1")
    if not timestamp or not signature:
        return False
    try:
        timestamp_value = int(timestamp)
    except ValueError:
        return False

    current = time.time() if now is None else now
    if abs(current - timestamp_value) > tolerance_sec:
        return False

    payload = timestamp.encode("utf-8") + b"." + body
    expected = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)
