"""
Custom errors for the project.
Raised by catalog sources, query correction and configuration checks.
"""


class GemFinderError(Exception):
    """Generic application error."""
    pass


# ---------------- Configuration ----------------

class ConfigurationError(GemFinderError):
    """Missing or invalid environment configuration."""
    pass


# ---------------- Collaborators ----------------

class CatalogError(GemFinderError):
    """The product catalog could not be fetched from its store."""
    pass


class QueryCorrectionError(GemFinderError):
    """The typo-correction call failed or returned an unusable payload."""
    pass
