"""Exceptions raised inside ws-search."""


class WsSearchError(Exception):
    """Base class for ws-search errors."""


class WorkspaceUnreadableError(WsSearchError):
    """The workspace root is missing or cannot be listed."""

    def __init__(self, workspace: str, reason: str = "") -> None:
        self.workspace = workspace
        message = f"Cannot read workspace: {workspace}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
