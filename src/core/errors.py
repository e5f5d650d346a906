class RaceConfigurationError(ValueError):
    """
    Raised when a race is started with input that can never produce a result,
    such as an empty endpoint list.
    """
