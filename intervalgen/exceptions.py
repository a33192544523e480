class IntervalGenError(Exception): ...


class InvalidArgumentError(IntervalGenError, ValueError): ...


class GenerationExhaustedError(IntervalGenError): ...


class ConfigError(InvalidArgumentError): ...


def require(
    condition: bool, message: str, exc: type[IntervalGenError] = InvalidArgumentError
):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
