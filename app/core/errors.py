from fastapi import HTTPException


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Login required"):
        super().__init__(status_code=401, detail=detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "You cannot modify this expense"):
        super().__init__(status_code=403, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Expense not found"):
        super().__init__(status_code=404, detail=detail)


class ValidationError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)


class UpstreamStoreError(HTTPException):
    """The row store backend failed (network, quota, credentials)."""

    def __init__(self, detail: str = "Row store request failed"):
        super().__init__(status_code=502, detail=detail)
