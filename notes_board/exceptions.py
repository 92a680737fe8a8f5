"""
Error kinds raised by Notes Board
"""


class NotesBoardError(Exception):
    """Base error carrying a user-facing message"""

    default_message = "Something went wrong"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(NotesBoardError):
    """Input rejected before any collaborator call"""

    default_message = "Invalid note"


class ConnectivityError(NotesBoardError):
    """A collaborator call failed or timed out"""

    default_message = "Network request failed"


class NotFoundError(NotesBoardError):
    """Referenced note does not exist"""

    default_message = "Note not found"


class StateError(NotesBoardError):
    """Command is not allowed in the current state"""

    default_message = "Operation not allowed right now"
