# Copyright 2025 - Oumi
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

import json

_NON_RETRIABLE_STATUS_CODES = {
    400,  # Bad Request
    401,  # Unauthorized
    403,  # Forbidden
    404,  # Not Found
    422,  # Unprocessable Entity
}

_RETRIABLE_STATUS_CODES = {
    408,  # Request Timeout
    429,  # Too Many Requests
}


def is_success_status_code(status_code: int) -> bool:
    """Check if a status code is a 2xx success."""
    return 200 <= status_code < 300


def is_non_retriable_status_code(status_code: int) -> bool:
    """Check if a status code is non-retriable."""
    return status_code in _NON_RETRIABLE_STATUS_CODES


def is_retriable_status_code(status_code: int) -> bool:
    """Check if retrying a request that failed with this status may succeed."""
    return status_code in _RETRIABLE_STATUS_CODES or 500 <= status_code < 600


def get_failure_reason_from_body(status_code: int, body: bytes) -> str:
    """Return a string describing the error from a raw response body.

    The Gemini API reports errors as `{"error": {"message": ...}}`; some proxies
    wrap that object in a list.
    """
    try:
        response_json = json.loads(body) if body else None
        if isinstance(response_json, list):
            response_json = response_json[0] if response_json else None
        error_msg = None
        if isinstance(response_json, dict):
            error = response_json.get("error")
            if isinstance(error, dict):
                error_msg = error.get("message")
            elif isinstance(error, str):
                error_msg = error
    except (json.JSONDecodeError, UnicodeDecodeError):
        error_msg = None

    return error_msg or f"HTTP {status_code}"
