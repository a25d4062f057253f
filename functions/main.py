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

# Cloud functions for the Meteor backend - channel lookup and video
# upload / delete / transcode orchestration.
#
# This file containing Python cloud functions must be named main.py.
# See https://cloud.google.com/run/docs/write-functions#python for more info.

# Standard library imports
import functools
import json
from collections.abc import Mapping
from dataclasses import asdict
from typing import Any, Optional

# Third-party library imports
from firebase_admin import auth, firestore, initialize_app
from firebase_functions import https_fn, logger, options

# Local application imports
from channels import channels
from shared.config import get_settings
from shared.constants import (
    ALLOWED_MIME_PREFIX,
    MAX_CHANNEL_NAME_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_ID_LENGTH,
    MAX_TITLE_LENGTH,
    WEBHOOK_SIGNATURE_HEADER,
    WEBHOOK_TOLERANCE_SEC,
)
from shared.errors import (
    InvalidArgumentError,
    ServiceError,
    UnauthenticatedError,
)
from shared.json_utils import convert_keys
from shared.types import InvocationContext
from videos import mux, video_content
from videos.dependencies import get_storage_client, get_transcoder_client

UPLOAD_FUNCTION_TIMEOUT = 540

initialize_app()


def _to_client(record) -> dict:
    return convert_keys(asdict(record), "snake_to_camel")


def _callable_errors(func):
    """Surfaces ServiceErrors raised by a handler as HttpsErrors."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ServiceError as e:
            logger.warn(f"{func.__name__} failed: {e.message}")
            raise e.to_https_error() from e

    return wrapper


def _require_context(req: https_fn.CallableRequest) -> InvocationContext:
    if not req.auth:
        raise https_fn.HttpsError(
            https_fn.FunctionsErrorCode.UNAUTHENTICATED,
            "User must be authenticated to make this request",
        )
    return InvocationContext(user_id=req.auth.uid)


def _request_fields(data: Any) -> Mapping:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise InvalidArgumentError("Request data must be an object.")
    return data


def _require_string(data: Any, key: str, max_length: int) -> str:
    value = _request_fields(data).get(key)
    if not value or not isinstance(value, str):
        raise InvalidArgumentError(f"Must specify {key} parameter.")
    if len(value) > max_length:
        raise InvalidArgumentError(f"Incorrect {key} length.")
    return value


def _optional_string(data: Any, key: str, max_length: int) -> Optional[str]:
    value = _request_fields(data).get(key)
    if value is None:
        return None
    if not isinstance(value, str) or len(value) > max_length:
        raise InvalidArgumentError(f"Invalid {key} parameter.")
    return value


@https_fn.on_call(memory=options.MemoryOption.MB_256)
def get_channels(req: https_fn.CallableRequest) -> list:
    """
    Returns the channels owned by a user.

    Args:
        req (https_fn.CallableRequest): The request, containing the `user` uid.

    Returns:
        A list of at most 100 channel dictionaries.
    """
    return handle_get_channels(_require_context(req), req.data)


@_callable_errors
def handle_get_channels(context: InvocationContext, data: Optional[dict]) -> list:
    user = _require_string(data, "user", MAX_ID_LENGTH)
    db = firestore.client()
    return [_to_client(channel) for channel in channels.get_user_channels(db, user)]


@https_fn.on_call(memory=options.MemoryOption.MB_256)
def create_channel(req: https_fn.CallableRequest) -> dict:
    """Creates a channel owned by the caller."""
    return handle_create_channel(_require_context(req), req.data)


@_callable_errors
def handle_create_channel(context: InvocationContext, data: Optional[dict]) -> dict:
    name = _require_string(data, "name", MAX_CHANNEL_NAME_LENGTH)
    description = _optional_string(data, "description", MAX_DESCRIPTION_LENGTH)
    db = firestore.client()
    return _to_client(channels.create_channel(db, context, name, description))


@https_fn.on_call(memory=options.MemoryOption.MB_256)
def get_channel_videos(req: https_fn.CallableRequest) -> list:
    """
    Returns the videos of a channel.

    Args:
        req (https_fn.CallableRequest): The request, containing the `channel` id.

    Returns:
        A list of at most 100 video dictionaries.
    """
    return handle_get_channel_videos(_require_context(req), req.data)


@_callable_errors
def handle_get_channel_videos(context: InvocationContext, data: Optional[dict]) -> list:
    channel_id = _require_string(data, "channel", MAX_ID_LENGTH)
    db = firestore.client()
    return [
        _to_client(video)
        for video in video_content.get_channel_videos(db, channel_id)
    ]


@https_fn.on_call(memory=options.MemoryOption.MB_256)
def get_video(req: https_fn.CallableRequest) -> dict:
    return handle_get_video(_require_context(req), req.data)


@_callable_errors
def handle_get_video(context: InvocationContext, data: Optional[dict]) -> dict:
    video_id = _require_string(data, "id", MAX_ID_LENGTH)
    return _to_client(video_content.get_video(firestore.client(), video_id))


@https_fn.on_call(memory=options.MemoryOption.MB_256)
def create_video(req: https_fn.CallableRequest) -> dict:
    """
    Creates a video record waiting for its upload.

    Args:
        req (https_fn.CallableRequest): The request, containing `channel`,
          `title` and optionally `description`.
    """
    return handle_create_video(_require_context(req), req.data)


@_callable_errors
def handle_create_video(context: InvocationContext, data: Optional[dict]) -> dict:
    channel_id = _require_string(data, "channel", MAX_ID_LENGTH)
    title = _require_string(data, "title", MAX_TITLE_LENGTH)
    description = _optional_string(data, "description", MAX_DESCRIPTION_LENGTH)
    db = firestore.client()
    return _to_client(
        video_content.create_video(db, context, channel_id, title, description)
    )


@https_fn.on_call(memory=options.MemoryOption.MB_256)
def delete_video(req: https_fn.CallableRequest) -> dict:
    """
    Deletes a video's transcoder asset and content record.

    Args:
        req (https_fn.CallableRequest): The request, containing the video `id`.
    """
    return handle_delete_video(_require_context(req), req.data)


@_callable_errors
def handle_delete_video(context: InvocationContext, data: Optional[dict]) -> dict:
    video_id = _require_string(data, "id", MAX_ID_LENGTH)
    settings = get_settings()
    video_content.delete_video(
        firestore.client(),
        context,
        video_id,
        storage_client=get_storage_client(),
        transcoder=get_transcoder_client(),
        masters_prefix=settings.masters_prefix,
    )
    return {"status": "success"}


def _json_response(payload: Any, status: int = 200) -> https_fn.Response:
    return https_fn.Response(
        json.dumps(payload), status=status, mimetype="application/json"
    )


def _error_response(error: ServiceError) -> https_fn.Response:
    return _json_response(error.to_dict(), status=error.http_status)


def _verify_bearer_token(req: https_fn.Request) -> InvocationContext:
    """Verifies the Firebase ID token sent in the Authorization header."""
    header = req.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        raise UnauthenticatedError()
    id_token = header[len("Bearer "):]
    try:
        decoded_token = auth.verify_id_token(id_token)
    except (auth.InvalidIdTokenError, ValueError) as e:
        raise UnauthenticatedError(f"Invalid ID token: {e}") from e
    return InvocationContext(user_id=decoded_token["uid"])


@https_fn.on_request(
    timeout_sec=UPLOAD_FUNCTION_TIMEOUT, memory=options.MemoryOption.GB_1
)
def upload_video(req: https_fn.Request) -> https_fn.Response:
    """
    Uploads the master file of a video and calls the transcoder.

    Expects `POST /?id=<video id>` with the raw video as body, its MIME type as
    Content-Type and a Firebase ID token as Bearer authorization.
    """
    if req.method != "POST":
        return _json_response(
            {"error": {"status": "INVALID_ARGUMENT", "message": "Use POST."}},
            status=405,
        )

    try:
        context = _verify_bearer_token(req)
        video_id = _require_string(req.args, "id", MAX_ID_LENGTH)
        mime = req.mimetype
        if not mime or not mime.startswith(ALLOWED_MIME_PREFIX):
            raise InvalidArgumentError(f"Unsupported content type: {mime or 'none'}.")

        settings = get_settings()
        video = video_content.upload_video(
            firestore.client(),
            context,
            video_id,
            req.stream,
            mime,
            storage_client=get_storage_client(),
            transcoder=get_transcoder_client(),
            masters_prefix=settings.masters_prefix,
        )
    except ServiceError as e:
        logger.warn(f"upload_video failed: {e.message}")
        return _error_response(e)

    logger.info(f"Uploaded video {video.id} for transcoding")
    return _json_response({"result": _to_client(video)})


@https_fn.on_request(memory=options.MemoryOption.MB_256)
def transcoder_webhook(req: https_fn.Request) -> https_fn.Response:
    """
    Receives Mux webhook events and updates the matching content record.
    """
    body = req.get_data()
    settings = get_settings()
    if settings.mux_webhook_secret:
        signature = req.headers.get(WEBHOOK_SIGNATURE_HEADER)
        if not mux.verify_webhook_signature(
            body, signature, settings.mux_webhook_secret, WEBHOOK_TOLERANCE_SEC
        ):
            return _error_response(UnauthenticatedError("Invalid webhook signature."))
    else:
        logger.warn("MUX_WEBHOOK_SECRET is not set; accepting unsigned webhook.")

    event = req.get_json(silent=True)
    if not isinstance(event, dict):
        return _error_response(
            InvalidArgumentError("Webhook body must be a JSON object.")
        )

    status = video_content.apply_transcoder_event(firestore.client(), event)
    return _json_response({"received": True, "status": status})
