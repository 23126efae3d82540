"""Error taxonomy for the API service.

Route handlers raise these the same way they would raise `HTTPException`.
The handlers registered in `main.py` render them, along with request
validation failures and storage errors, as

    {"ok": false, "error": "<code>", "detail": "<message>"}

Codes and statuses:

    validation       422
    unauthorized     401
    forbidden        403
    not_found        404
    conflict         409
    upload_rejected  413 / 415
    storage_error    500
"""

from fastapi import HTTPException


class ApiError(HTTPException):
    code = "error"
    status_code = 500

    def __init__(self, detail: str, status_code: int | None = None, headers: dict | None = None):
        super().__init__(status_code=status_code or self.status_code, detail=detail, headers=headers)


class Unauthorized(ApiError):
    code = "unauthorized"
    status_code = 401

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(ApiError):
    code = "forbidden"
    status_code = 403

    def __init__(self, detail: str = "Access denied"):
        super().__init__(detail)


class NotFound(ApiError):
    code = "not_found"
    status_code = 404


class Conflict(ApiError):
    code = "conflict"
    status_code = 409


class UploadRejected(ApiError):
    code = "upload_rejected"
    status_code = 415


def error_body(code: str, detail) -> dict:
    """Build the error envelope returned to clients."""
    return {"ok": False, "error": code, "detail": detail}
