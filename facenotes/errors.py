# facenotes/errors.py
from typing import Optional


class FaceNotesError(Exception):
    """Base class for errors that are reported to the API caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(FaceNotesError):
    """Malformed or missing input: empty name, absent or empty descriptor."""

    status_code = 400


class DuplicateIdentityError(FaceNotesError):
    """A user with the same name (case-insensitive) is already enrolled."""

    status_code = 400


class NotFoundError(FaceNotesError):
    status_code = 404


class NoMatchError(FaceNotesError):
    """
    Users are enrolled but none is close enough to the query descriptor.
    Carries the best distance reached so the caller can tell a bad capture
    from an unknown face.
    """

    status_code = 401

    def __init__(self, message: str, best_distance: float, suggestion: Optional[str] = None):
        super().__init__(message)
        self.best_distance = best_distance
        self.suggestion = suggestion

    def to_dict(self) -> dict:
        body = super().to_dict()
        # inf is not valid JSON
        body["bestDistance"] = (
            round(self.best_distance, 4) if self.best_distance != float("inf") else None
        )
        if self.suggestion:
            body["suggestion"] = self.suggestion
        return body


class AuthenticationError(FaceNotesError):
    """Missing, invalid or expired access token."""

    status_code = 401
