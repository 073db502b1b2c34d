"""
Error taxonomy for Storyloom.

Only the collaborators raise these (import, persistence client, identity).
The graph model, the document reducer, the router and the preview engine
degrade to no-ops or explicit states instead.
"""


class StoryloomError(Exception):
    """Base class for errors that are shown to the user as a message."""

    default_message = "Something went wrong"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.default_message

    def __str__(self) -> str:
        return self.message


class UserInputError(StoryloomError):
    """The user supplied something unusable (e.g. a malformed import file)."""
    default_message = "Failed to import story. Please check the file format."


class AuthError(StoryloomError):
    """Missing or rejected credentials. The session should be cleared."""
    default_message = "Unauthorized"


class NotFoundError(StoryloomError):
    """The requested story does not exist for this user."""
    default_message = "Story not found"


class TransientNetworkError(StoryloomError):
    """The service could not be reached or answered with an error. Never retried."""
    default_message = "Network error, please try again"
