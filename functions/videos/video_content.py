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

import logging
from dataclasses import asdict
from typing import IO, Optional

from dacite import Config, from_dict
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from channels import channels
from shared.config import get_settings
from shared.constants import CONTENT_COLLECTION, MAX_QUERY_RESULTS
from shared.errors import AuthorizationError, ResourceNotFoundError
from shared.json_utils import convert_keys
from shared.types import InvocationContext, VideoContent, VideoStatus
from videos import mux
from videos.mux import TranscoderClient
from videos.storage import StorageClient

logger = logging.getLogger(__name__)

def _video_ref(db, video_id: str):
    return db.collection(CONTENT_COLLECTION).document(video_id)


def video_from_snapshot(snapshot) -> VideoContent:
    data = convert_keys(snapshot.to_dict() or {}, "camel_to_snake")
    data["id"] = snapshot.id
    return from_dict(
        data_class=VideoContent,
        data=data,
        config=Config(check_types=False, cast=[VideoStatus]),
    )


def video_to_document(video: VideoContent) -> dict:
    """Firestore representation of a video, without its id."""
    data = asdict(video)
    del data["id"]
    return convert_keys(data, "snake_to_camel")


def master_path(user_id: str, video_id: str, prefix: Optional[str] = None) -> str:
    """Storage path of a master; the prefix defaults to the configured one."""
    if prefix is None:
        prefix = get_settings().masters_prefix
    return f"{prefix}/{user_id}/{video_id}"


def get_video(db, video_id: str) -> VideoContent:
    """
    Retrieves a content record.

    Args:
        db: Firestore client.
        video_id (str): ID of the content record.

    Raises:
        ResourceNotFoundError: If the record does not exist.
    """
    snapshot = _video_ref(db, video_id).get()
    if not snapshot.exists:
        raise ResourceNotFoundError("VideoContent", video_id)
    return video_from_snapshot(snapshot)


def get_channel_videos(db, channel_id: str) -> list[VideoContent]:
    """Returns up to MAX_QUERY_RESULTS videos published on a channel."""
    channels.get_channel(db, channel_id)
    query = (
        db.collection(CONTENT_COLLECTION)
        .where(filter=FieldFilter("channel", "==", channel_id))
        .limit(MAX_QUERY_RESULTS)
    )
    return [video_from_snapshot(snapshot) for snapshot in query.stream()]


def create_video(
    db,
    context: InvocationContext,
    channel_id: str,
    title: str,
    description: Optional[str] = None,
) -> VideoContent:
    """
    Creates an empty content record on a channel owned by the caller.

    The record waits for its master file to be sent to `upload_video`.
    """
    channel = channels.get_channel(db, channel_id)
    if channel.owner != context.user_id:
        raise AuthorizationError("Channel", "add videos")

    doc_ref = db.collection(CONTENT_COLLECTION).document()
    video = VideoContent(
        id=doc_ref.id,
        author=context.user_id,
        channel=channel_id,
        title=title,
        description=description,
    )
    doc = video_to_document(video)
    doc["createdTimestamp"] = SERVER_TIMESTAMP
    doc["updatedTimestamp"] = SERVER_TIMESTAMP
    doc_ref.set(doc)
    logger.info("Created video %s on channel %s", video.id, channel_id)
    return video


def upload_video(
    db,
    context: InvocationContext,
    video_id: str,
    stream: IO[bytes],
    mime: str,
    storage_client: StorageClient,
    transcoder: TranscoderClient,
    masters_prefix: Optional[str] = None,
) -> VideoContent:
    """
    Uploads the master file of a video and starts transcoding it.

    - Only the author of the record may upload its data.
    - The stream is copied to `<masters_prefix>/<uid>/<video_id>` and made
      public so the transcoder can fetch it.
    - The created asset is recorded and the video moves to PROCESSING.

    Args:
        db: Firestore client.
        context (InvocationContext): The caller.
        video_id (str): ID of the video to upload.
        stream: Readable binary stream with the video data.
        mime (str): MIME type of the video.
        storage_client: Object storage holding the masters.
        transcoder: Remote transcoder client.

    Returns:
        VideoContent: The updated record.
    """
    video = get_video(db, video_id)
    if context.user_id != video.author:
        raise AuthorizationError("VideoContent", "upload video data")

    path = master_path(context.user_id, video_id, masters_prefix)
    storage_client.upload_stream(path, stream, mime)
    storage_client.make_public(path)

    asset = transcoder.create_asset(storage_client.public_url(path), passthrough=video_id)

    video.mime = mime
    video.asset_id = asset.get("id")
    video.playback_id = mux.first_public_playback_id(asset)
    video.status = VideoStatus.PROCESSING
    _video_ref(db, video_id).update(
        {
            "mime": video.mime,
            "assetID": video.asset_id,
            "playbackID": video.playback_id,
            "status": video.status,
            "updatedTimestamp": SERVER_TIMESTAMP,
        }
    )
    logger.info("Started transcoding %s as asset %s", video_id, video.asset_id)
    return video


def delete_video(
    db,
    context: InvocationContext,
    video_id: str,
    storage_client: StorageClient,
    transcoder: TranscoderClient,
    masters_prefix: Optional[str] = None,
) -> None:
    """
    Deletes a video: the transcoder asset, the stored master, then the record.
    """
    video = get_video(db, video_id)
    if context.user_id != video.author:
        raise AuthorizationError("VideoContent", "delete video")

    if video.asset_id:
        transcoder.delete_asset(video.asset_id)

    # A master may exist even when the transcoder call of its upload failed.
    try:
        storage_client.delete(master_path(video.author, video_id, masters_prefix))
    except FileNotFoundError:
        logger.info("No master stored for video %s", video_id)

    _video_ref(db, video_id).delete()
    logger.info("Deleted video %s", video_id)


def apply_transcoder_event(db, event: dict) -> Optional[VideoStatus]:
    """
    Mirrors a transcoder webhook event onto the matching content record.

    Returns:
        The new status of the record, or None if the event was ignored.
    """
    event_type = event.get("type")
    asset = event.get("data") or {}

    if event_type == mux.ASSET_READY_EVENT:
        status = VideoStatus.READY
    elif event_type == mux.ASSET_ERRORED_EVENT:
        status = VideoStatus.ERROR
    else:
        logger.info("Ignoring transcoder event %s", event_type)
        return None

    video_id = asset.get("passthrough")
    if not video_id:
        logger.warning("Transcoder event %s has no passthrough", event_type)
        return None

    doc_ref = _video_ref(db, video_id)
    if not doc_ref.get().exists:
        logger.warning("Transcoder event %s for unknown video %s", event_type, video_id)
        return None

    updates = {
        "assetID": asset.get("id"),
        "status": status,
        "updatedTimestamp": SERVER_TIMESTAMP,
    }
    playback_id = mux.first_public_playback_id(asset)
    if playback_id:
        updates["playbackID"] = playback_id
    doc_ref.update(updates)
    return status
