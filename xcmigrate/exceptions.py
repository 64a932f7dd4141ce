"""Custom exceptions for xcmigrate."""


class XcmigrateError(Exception):
    """Base exception for xcmigrate errors."""
    code = "PROCESSING_ERROR"


class ConfigError(XcmigrateError):
    """Raised when the run configuration is invalid."""
    code = "CONFIG_ERROR"

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ModelLoadError(XcmigrateError):
    """Raised when a model version cannot be read or parsed."""
    code = "MODEL_LOAD_ERROR"

    def __init__(self, version: int, path: str, reason: str):
        super().__init__(f"Cannot load version {version} from '{path}': {reason}")
        self.version = version
        self.path = path
        self.reason = reason


class NoVersionsFoundError(XcmigrateError):
    """Raised when the model bundle holds no version directories."""
    code = "NO_VERSIONS"

    def __init__(self, model_dir: str):
        super().__init__(f"No versions found in '{model_dir}'")
        self.model_dir = model_dir
