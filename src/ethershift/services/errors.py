"""Service-layer exceptions."""


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""


class FactoryError(Exception):
    """Raised when a runtime session cannot be created."""
