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

from firebase_functions import https_fn

_STATUS_BY_CODE = {
    https_fn.FunctionsErrorCode.INVALID_ARGUMENT: 400,
    https_fn.FunctionsErrorCode.UNAUTHENTICATED: 401,
    https_fn.FunctionsErrorCode.PERMISSION_DENIED: 403,
    https_fn.FunctionsErrorCode.NOT_FOUND: 404,
    https_fn.FunctionsErrorCode.INTERNAL: 500,
    https_fn.FunctionsErrorCode.UNAVAILABLE: 503,
}


class ServiceError(Exception):
    """Base class for errors surfaced directly to the caller."""

    code = https_fn.FunctionsErrorCode.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def http_status(self) -> int:
        return _STATUS_BY_CODE.get(self.code, 500)

    def to_https_error(self) -> https_fn.HttpsError:
        return https_fn.HttpsError(self.code, self.message)

    def to_dict(self) -> dict:
        """The error envelope used by the callable protocol."""
        return {"error": {"status": self.code.name, "message": self.message}}


class UnauthenticatedError(ServiceError):
    code = https_fn.FunctionsErrorCode.UNAUTHENTICATED

    def __init__(self, message: str = "User must be authenticated to make this request"):
        super().__init__(message)


class InvalidArgumentError(ServiceError):
    code = https_fn.FunctionsErrorCode.INVALID_ARGUMENT


class ResourceNotFoundError(ServiceError):
    code = https_fn.FunctionsErrorCode.NOT_FOUND

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} {resource_id} was not found.")
        self.resource = resource
        self.resource_id = resource_id


class AuthorizationError(ServiceError):
    code = https_fn.FunctionsErrorCode.PERMISSION_DENIED

    def __init__(self, resource: str, action: str):
        super().__init__(f"Not authorized to {action} on {resource}.")
        self.resource = resource
        self.action = action


class TranscoderError(ServiceError):
    code = https_fn.FunctionsErrorCode.UNAVAILABLE
