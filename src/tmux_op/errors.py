"""Application-level error shared by all flow components."""


class OpError(Exception):
    """Failure that halts a retrieval flow and is shown to the user."""

    def __init__(self, code: str, message: str, hint: str = "") -> None:
        """Initialize with a machine-readable code and a human-readable message.

        Args:
            code: Machine-readable error code (e.g. "dependency_missing").
            message: Human-readable error description. Must never contain secret material.
            hint: Optional troubleshooting guidance printed after the message.

        """
        super().__init__(message)
        self.code = code
        self.hint = hint
