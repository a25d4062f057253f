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

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional


class VideoStatus(StrEnum):
    WAITING_FOR_UPLOAD = "WAITING_FOR_UPLOAD"
    PROCESSING = "PROCESSING"
    READY = "READY"
    ERROR = "ERROR"


@dataclass
class InvocationContext:
    """Identity of the caller a service operation runs on behalf of."""

    user_id: str


@dataclass
class Channel:
    id: str
    owner: str
    name: str
    description: Optional[str] = None


@dataclass
class VideoContent:
    """A video record, mirrored from the `content` collection."""

    id: str
    author: str
    channel: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    mime: Optional[str] = None
    asset_id: Optional[str] = None
    playback_id: Optional[str] = None
    status: VideoStatus = VideoStatus.WAITING_FOR_UPLOAD
