"""Root of the jre-trim exception hierarchy."""

from typing import Dict, Optional


class JreTrimError(Exception):
    """Anything that stops jre-trim from analyzing an archive or linking an image.

    ``details`` carries the facts a user needs to act on the failure (the
    archive entry, the JDK home, the jlink exit code, ...) and is appended to
    the message as ``key=value`` pairs, which is what the CLI prints after
    ``Error:``.
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        facts = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({facts})"
