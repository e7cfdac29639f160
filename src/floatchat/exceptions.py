# src/floatchat/exceptions.py


class FloatChatError(Exception):
    """Base class for dashboard domain errors"""


class UnknownFloatError(FloatChatError, KeyError):
    """Raised when a float id is not served by the fixture provider"""


class UnknownResultError(FloatChatError, KeyError):
    """Raised when an analysis result id is not tracked by the session"""


class AnalysisNotReadyError(FloatChatError):
    """Raised when a report is requested for an unfinished analysis"""
