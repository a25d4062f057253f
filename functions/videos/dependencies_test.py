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

import unittest
from unittest.mock import patch

from shared.config import Settings
from videos import dependencies
from videos.mux import InMemoryTranscoderClient, MuxClient
from videos.storage import GcsStorageClient, InMemoryStorageClient


class DependenciesTest(unittest.TestCase):

    def setUp(self):
        dependencies.reset_clients()
        self.addCleanup(dependencies.reset_clients)

    @patch("videos.dependencies.get_settings")
    def test_in_memory_backends(self, mock_get_settings):
        mock_get_settings.return_value = Settings(
            use_in_memory_backends=True, videos_bucket="test-bucket"
        )

        storage_client = dependencies.get_storage_client()

        self.assertIsInstance(storage_client, InMemoryStorageClient)
        self.assertEqual(storage_client.bucket, "test-bucket")
        self.assertIsInstance(
            dependencies.get_transcoder_client(), InMemoryTranscoderClient
        )

    @patch("videos.dependencies.get_settings")
    def test_real_clients_are_singletons(self, mock_get_settings):
        mock_get_settings.return_value = Settings(
            use_in_memory_backends=False,
            mux_token_id="id",
            mux_token_secret="secret",
            mux_request_timeout=5,
        )

        storage_client = dependencies.get_storage_client()
        transcoder = dependencies.get_transcoder_client()

        self.assertIsInstance(storage_client, GcsStorageClient)
        self.assertEqual(storage_client.bucket, "meteor-videos")
        self.assertIsInstance(transcoder, MuxClient)
        self.assertEqual(transcoder.timeout, 5)
        self.assertIs(dependencies.get_storage_client(), storage_client)
        self.assertIs(dependencies.get_transcoder_client(), transcoder)
        mock_get_settings.assert_called()

    @patch("videos.dependencies.get_settings")
    def test_missing_mux_credentials(self, mock_get_settings):
        mock_get_settings.return_value = Settings(
            use_in_memory_backends=False, mux_token_id=None, mux_token_secret=None
        )

        with self.assertLogs("videos.dependencies", level="ERROR") as logs:
            transcoder = dependencies.get_transcoder_client()

        self.assertIsInstance(transcoder, MuxClient)
        self.assertEqual(transcoder.token_id, "")
        self.assertIn("MUX_TOKEN_ID", logs.output[0])


if __name__ == "__main__":
    unittest.main()
