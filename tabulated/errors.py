class InterpFunctError(Exception):
    """Base class for tabulated function errors."""


class DataFileNotFoundError(InterpFunctError, FileNotFoundError):
    pass


class DataFileUnreadableError(InterpFunctError, OSError):
    pass


class MalformedInputError(InterpFunctError, ValueError):
    pass


class UnorderedSamplesError(MalformedInputError):
    """Argument values are not strictly increasing."""


class NotInitializedError(InterpFunctError, RuntimeError):
    pass


class InvalidDomainError(InterpFunctError, ValueError):
    pass
