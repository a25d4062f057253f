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
Configuration and settings for the video functions.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the cloud functions."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Cloud Storage
    videos_bucket: str = Field(default="meteor-videos")
    masters_prefix: str = Field(default="masters")
    storage_public_base_url: str = Field(default="https://storage.googleapis.com")

    # Mux
    mux_base_url: str = Field(default="https://api.mux.com/video/v1")
    mux_token_id: Optional[str] = Field(default=None)
    mux_token_secret: Optional[str] = Field(default=None)
    mux_webhook_secret: Optional[str] = Field(default=None)
    mux_request_timeout: float = Field(default=30.0)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
