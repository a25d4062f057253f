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

from dacite import Config, from_dict
from firebase_admin import auth
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from shared.constants import CHANNELS_COLLECTION, MAX_QUERY_RESULTS
from shared.errors import InvalidArgumentError, ResourceNotFoundError
from shared.json_utils import convert_keys
from shared.types import Channel, InvocationContext

logger = logging.getLogger(__name__)


def channel_from_snapshot(snapshot) -> Channel:
    data = convert_keys(snapshot.to_dict() or {}, "camel_to_snake")
    data["id"] = snapshot.id
    return from_dict(data_class=Channel, data=data, config=Config(check_types=False))


def get_channel(db, channel_id: str) -> Channel:
    """
    Retrieves a channel record.

    Raises:
        ResourceNotFoundError: If no channel exists with the given id.
    """
    snapshot = db.collection(CHANNELS_COLLECTION).document(channel_id).get()
    if not snapshot.exists:
        raise ResourceNotFoundError("Channel", channel_id)
    return channel_from_snapshot(snapshot)


def get_user_channels(db, user_id: str) -> list[Channel]:
    """
    Returns up to MAX_QUERY_RESULTS channels owned by a user.

    Args:
        db: Firestore client.
        user_id (str): Firebase Auth uid of the owner.

    Raises:
        InvalidArgumentError: If the user does not exist in Firebase Auth.
    """
    try:
        auth.get_user(user_id)
    except (auth.UserNotFoundError, ValueError) as e:
        logger.info("Channel lookup for unknown user %s: %s", user_id, e)
        raise InvalidArgumentError("User could not be found") from e

    query = (
        db.collection(CHANNELS_COLLECTION)
        .where(filter=FieldFilter("owner", "==", user_id))
        .limit(MAX_QUERY_RESULTS)
    )
    return [channel_from_snapshot(snapshot) for snapshot in query.stream()]


def create_channel(
    db, context: InvocationContext, name: str, description: str | None = None
) -> Channel:
    """Creates a channel owned by the caller."""
    doc_ref = db.collection(CHANNELS_COLLECTION).document()
    channel = Channel(
        id=doc_ref.id, owner=context.user_id, name=name, description=description
    )
    doc = asdict(channel)
    del doc["id"]
    doc["createdTimestamp"] = SERVER_TIMESTAMP
    doc_ref.set(convert_keys(doc, "snake_to_camel"))
    logger.info("Created channel %s for %s", channel.id, context.user_id)
    return channel
