"""Custom exceptions for service ranking."""


class ServiceSearchError(Exception):
    """Base exception for service ranking operations."""
    pass


class ValidationError(ServiceSearchError):
    """Exception raised during input validation."""
    pass


class ConfigurationError(ServiceSearchError):
    """Exception raised for invalid scoring policy or lexicon configuration."""
    pass


class ScorerError(ServiceSearchError):
    """Exception raised by semantic scorer or query analyzer collaborators."""
    pass


class SearchError(ServiceSearchError):
    """Exception raised during search operations."""
    pass
