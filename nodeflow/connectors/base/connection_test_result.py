from typing import Any, Dict, Optional


class ConnectionTestResult:
    """Result of a connection test."""

    def __init__(self, success: bool, message: Optional[str] = None):
        """Initialize a ConnectionTestResult.

        Args:
        ----
            success: Whether the test was successful
            message: Optional message with details

        """
        self.success = success
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message}

    def __repr__(self) -> str:
        return f"ConnectionTestResult(success={self.success}, message={self.message!r})"
