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

from unittest.mock import MagicMock

from shared.types import Channel, VideoContent, VideoStatus


def create_mock_channel(**overrides) -> Channel:
    fields = dict(
        id="channel1",
        owner="user1",
        name="Test Channel",
        description="A channel for tests.",
    )
    fields.update(overrides)
    return Channel(**fields)


def create_mock_video(**overrides) -> VideoContent:
    fields = dict(
        id="video1",
        author="user1",
        channel="channel1",
        title="Test Video",
        status=VideoStatus.WAITING_FOR_UPLOAD,
    )
    fields.update(overrides)
    return VideoContent(**fields)


def create_mock_snapshot(doc_id: str, data: dict | None) -> MagicMock:
    """Builds a Firestore DocumentSnapshot stand-in; `None` data means missing."""
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = data is not None
    snapshot.to_dict.return_value = data
    return snapshot


def create_mock_db(snapshot: MagicMock | None = None) -> tuple[MagicMock, MagicMock]:
    """
    Returns a mock Firestore client and the document reference every
    `db.collection(...).document(...)` call resolves to.
    """
    db = MagicMock()
    doc_ref = MagicMock()
    if snapshot is not None:
        doc_ref.get.return_value = snapshot
    db.collection.return_value.document.return_value = doc_ref
    return db, doc_ref
