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
Client wiring for the video functions.
"""

from __future__ import annotations

import logging

from firebase_admin import storage

from shared.config import get_settings
from videos.mux import InMemoryTranscoderClient, MuxClient, TranscoderClient
from videos.storage import GcsStorageClient, InMemoryStorageClient, StorageClient

logger = logging.getLogger(__name__)

_storage_client: StorageClient | None = None
_transcoder_client: TranscoderClient | None = None


def get_storage_client() -> StorageClient:
    """
    Return a singleton storage client for the videos bucket.
    """
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _storage_client = InMemoryStorageClient(bucket=settings.videos_bucket)
    else:
        _storage_client = GcsStorageClient(
            storage_module=storage,
            bucket=settings.videos_bucket,
            base_url=settings.storage_public_base_url,
        )
    return _storage_client


def get_transcoder_client() -> TranscoderClient:
    """
    Return a singleton Mux client, or an in-memory one in in-memory mode.
    """
    global _transcoder_client
    if _transcoder_client:
        return _transcoder_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _transcoder_client = InMemoryTranscoderClient()
    else:
        if not settings.mux_token_id or not settings.mux_token_secret:
            # Mux rejects the calls; uploads and deletes fail as UNAVAILABLE.
            logger.error("MUX_TOKEN_ID and MUX_TOKEN_SECRET must be set")
        _transcoder_client = MuxClient(
            token_id=settings.mux_token_id or "",
            token_secret=settings.mux_token_secret or "",
            base_url=settings.mux_base_url,
            timeout=settings.mux_request_timeout,
        )
    return _transcoder_client


def reset_clients() -> None:
    """Drops cached clients so the next call re-reads settings."""
    global _storage_client, _transcoder_client
    _storage_client = None
    _transcoder_client = None
