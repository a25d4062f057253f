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

# Firestore collections
CHANNELS_COLLECTION = "channels"
CONTENT_COLLECTION = "content"

# Query limits
MAX_QUERY_RESULTS = 100

# Input limits
MAX_ID_LENGTH = 128
MAX_CHANNEL_NAME_LENGTH = 100
MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 5000

# Upload
ALLOWED_MIME_PREFIX = "video/"

# Transcoder webhook
WEBHOOK_SIGNATURE_HEADER = "Mux-Signature"
WEBHOOK_TOLERANCE_SEC = 300
