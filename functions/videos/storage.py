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
Object storage abstraction for video masters: Cloud Storage and in-memory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import IO, Any, Protocol

from google.api_core import exceptions

logger = logging.getLogger(__name__)


class StorageClient(Protocol):
    """Defines the operations the video functions need from object storage."""

    def upload_stream(self, path: str, stream: IO[bytes], content_type: str) -> None:
        ...

    def make_public(self, path: str) -> None:
        ...

    def public_url(self, path: str) -> str:
        ...

    def delete(self, path: str) -> None:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    bucket: str = "meteor-videos"
    base_url: str = "https://example.test/storage"
    stored_objects: dict[str, bytes] = field(default_factory=dict)
    content_types: dict[str, str] = field(default_factory=dict)
    public_paths: set[str] = field(default_factory=set)

    def upload_stream(self, path: str, stream: IO[bytes], content_type: str) -> None:
        self.stored_objects[path] = stream.read()
        self.content_types[path] = content_type

    def make_public(self, path: str) -> None:
        if path not in self.stored_objects:
            raise FileNotFoundError(path)
        self.public_paths.add(path)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{self.bucket}/{path}"

    def delete(self, path: str) -> None:
        if self.stored_objects.pop(path, None) is None:
            raise FileNotFoundError(path)
        self.content_types.pop(path, None)
        self.public_paths.discard(path)


@dataclass
class GcsStorageClient:
    """
    Cloud Storage client backed by the Firebase Admin SDK.

    `storage_module` is `firebase_admin.storage`; it is passed in so the
    Firebase app is only touched when a bucket is first needed.
    """

    storage_module: Any
    bucket: str
    base_url: str = "https://storage.googleapis.com"

    def _blob(self, path: str):
        return self.storage_module.bucket(self.bucket).blob(path)

    def upload_stream(self, path: str, stream: IO[bytes], content_type: str) -> None:
        logger.info("Uploading gs://%s/%s (%s)", self.bucket, path, content_type)
        self._blob(path).upload_from_file(stream, content_type=content_type)

    def make_public(self, path: str) -> None:
        self._blob(path).make_public()

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{self.bucket}/{path}"

    def delete(self, path: str) -> None:
        try:
            self._blob(path).delete()
        except exceptions.NotFound as e:
            raise FileNotFoundError(path) from e
