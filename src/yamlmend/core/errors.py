"""Domain exceptions raised at the parser seam and caught at the gate."""

from typing import Optional

from yamlmend.core.models import ErrorPosition


class YamlParseError(ValueError):
    """Raised by the parser adapter when strict parsing fails."""

    def __init__(self, message: str, position: Optional[ErrorPosition] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    def describe(self) -> str:
        """Message with the location appended when the parser offered one."""
        if self.position is None:
            return self.message
        return f"{self.message} (line {self.position.line}, col {self.position.column})"


class UnrecoverableInput(YamlParseError):
    """
    Reconstruction completed but the result still fails strict parsing.
    Carries the best-effort text so callers can show it for inspection.
    """

    def __init__(self, message: str, text: str, position: Optional[ErrorPosition] = None):
        super().__init__(message, position)
        self.text = text
