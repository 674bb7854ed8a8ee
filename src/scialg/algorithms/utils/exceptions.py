"""
Custom exceptions for the algorithms package.
"""

class ScialgError(Exception):
    """Base exception for scialg errors.
    
    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class DimensionMismatchError(ScialgError, ValueError):
    """Raised when vector lengths disagree or a 3-D only operation is used
    on a vector of another dimension.
    
    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class NonConvergentError(ScialgError):
    """Raised when an adaptive step cannot reach the requested tolerance.
    
    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class InvalidConfigurationError(ScialgError, ValueError):
    """Raised when a step size, tolerance or step count is out of range.
    
    Parameters
    ----------
    message : str
        The error message.
    """
    
    def __init__(self, message: str):
        super().__init__(message)


class IntegrationTimeoutError(ScialgError):
    """Raised when a driver run exceeds its wall-clock deadline.
    
    Parameters
    ----------
    message : str
        The error message.
    """
    
    def __init__(self, message: str):
        super().__init__(message)
