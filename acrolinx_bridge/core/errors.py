from __future__ import annotations
from typing import List, Optional


class AcrolinxError(Exception):
    """Base class for every failure of the check workflow."""


class TransportError(AcrolinxError):
    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class ParseError(AcrolinxError, ValueError):
    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class ConfigurationError(AcrolinxError):
    pass


class SelectionError(AcrolinxError):
    def __init__(self, message: str, targets: Optional[List] = None):
        super().__init__(message)
        self.targets = targets or []


class SubmissionError(AcrolinxError):
    pass


class PollTimeoutError(AcrolinxError, TimeoutError):
    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class CheckCancelledError(AcrolinxError):
    pass
