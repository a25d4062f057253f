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

import io
import unittest
from unittest.mock import MagicMock

from google.api_core import exceptions

from videos.storage import GcsStorageClient, InMemoryStorageClient


class GcsStorageClientTest(unittest.TestCase):

    def setUp(self):
        self.storage_module = MagicMock()
        self.blob = self.storage_module.bucket.return_value.blob.return_value
        self.client = GcsStorageClient(
            storage_module=self.storage_module, bucket="meteor-videos"
        )

    def test_upload_stream(self):
        stream = io.BytesIO(b"video")
        self.client.upload_stream("masters/u/v", stream, "video/mp4")

        self.storage_module.bucket.assert_called_with("meteor-videos")
        self.storage_module.bucket.return_value.blob.assert_called_with("masters/u/v")
        self.blob.upload_from_file.assert_called_once_with(
            stream, content_type="video/mp4"
        )

    def test_make_public(self):
        self.client.make_public("masters/u/v")
        self.blob.make_public.assert_called_once_with()

    def test_public_url(self):
        self.assertEqual(
            self.client.public_url("masters/u/v"),
            "https://storage.googleapis.com/meteor-videos/masters/u/v",
        )

    def test_delete_missing_object(self):
        self.blob.delete.side_effect = exceptions.NotFound("gone")
        with self.assertRaises(FileNotFoundError):
            self.client.delete("masters/u/v")


class InMemoryStorageClientTest(unittest.TestCase):

    def test_round_trip(self):
        client = InMemoryStorageClient()
        client.upload_stream("a/b", io.BytesIO(b"data"), "video/quicktime")
        client.make_public("a/b")

        self.assertEqual(client.stored_objects["a/b"], b"data")
        self.assertEqual(client.content_types["a/b"], "video/quicktime")
        self.assertIn("a/b", client.public_paths)

        client.delete("a/b")
        self.assertNotIn("a/b", client.public_paths)
        with self.assertRaises(FileNotFoundError):
            client.delete("a/b")

    def test_make_public_requires_object(self):
        with self.assertRaises(FileNotFoundError):
            InMemoryStorageClient().make_public("missing")


if __name__ == "__main__":
    unittest.main()
