from fastapi import HTTPException
from typing import Any, Dict, List, Optional

class ReleaseBuilderException(HTTPException):
    """Base exception for the Release Builder API"""
    def __init__(
        self,
        status_code: int,
        detail: Any,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)

class NotFoundException(ReleaseBuilderException):
    """Resource not found"""
    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            status_code=404,
            detail=f"{resource} with id {resource_id} not found"
        )

class DuplicateError(ReleaseBuilderException):
    """Resource already exists"""
    def __init__(self, field: str, value: str):
        super().__init__(
            status_code=400,
            detail=f"{field} '{value}' already exists"
        )

class UnauthorizedError(ReleaseBuilderException):
    """User is not authorized"""
    def __init__(self, message: str = "Not authorized"):
        super().__init__(
            status_code=401,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"}
        )

class ForbiddenError(ReleaseBuilderException):
    """User is authenticated but lacks the role or ownership"""
    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(status_code=403, detail=message)

class InvalidTransitionError(ReleaseBuilderException):
    """Release status change that is not an edge of the lifecycle"""
    def __init__(self, transition: str, current_status: str):
        self.transition = transition
        self.current_status = current_status
        super().__init__(
            status_code=409,
            detail=f"Cannot {transition} a release with status '{current_status}'"
        )

class ValidationFailed(ReleaseBuilderException):
    """Input rejected before anything was written. Detail is a list of messages."""
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(status_code=422, detail=self.errors)
