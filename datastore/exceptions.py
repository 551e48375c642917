class DataStoreError(Exception):
    """Base class for all datastore exceptions."""
    pass

class ConfigurationError(DataStoreError):
    """Raised when there is an error in the configuration."""
    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original: {str(self.original_exception)})"
        return self.message

class PersistenceError(DataStoreError):
    """Base class for errors raised by a persistent store."""
    def __init__(self, message: str, original_exception: Exception = None):
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original: {str(self.original_exception)})"
        return self.message

class StoreUnavailableError(PersistenceError):
    """Raised when the persistent store cannot be opened or reached."""
    pass

class LoadError(PersistenceError):
    """Raised when reading a key fails for a reason other than absence."""
    pass

class SaveError(PersistenceError):
    """Raised when a write to the persistent store fails."""
    pass

class ValidationError(DataStoreError, ValueError):
    """Raised when input validation fails."""
    pass

class CacheClosedError(DataStoreError):
    """Raised when a closed CacheStore is used."""
    pass
