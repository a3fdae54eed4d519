"""
Error classes for the attribute limit filter.
"""


class AttrLimitError(Exception):
    """Base attribute limit error."""
    
    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "ATTRLIMIT_ERROR"
        self.details = details or {}


class ConfigurationError(AttrLimitError):
    """Invalid filter configuration or unusable alias map."""
    
    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message, error_code or "CONFIGURATION_ERROR", details)


class PatternError(AttrLimitError):
    """A value pattern failed to compile. Reported, never raised out of a filter pass."""
    
    def __init__(self, attribute: str, pattern: str, reason: str, details: dict = None):
        message = f"Invalid pattern {pattern!r} for attribute {attribute!r}: {reason}"
        super().__init__(message, "PATTERN_ERROR", details)
        self.attribute = attribute
        self.pattern = pattern
