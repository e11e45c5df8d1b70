"""Custom exceptions for LyricSmith."""

class LyricSmithError(Exception):
    """Base exception for LyricSmith."""
    pass

class ConfigError(LyricSmithError):
    """Invalid configuration value."""
    pass

class ValidationError(LyricSmithError):
    """Invalid input parameters."""
    pass

class MalformedInputError(LyricSmithError):
    """Annotated markup could not be parsed into records."""
    pass

class PreconditionError(LyricSmithError):
    """Operation requested before the state it needs exists."""
    pass

class ScenarioError(LyricSmithError):
    """Error loading or replaying a recorded merge scenario."""
    pass
