"""Error types raised by the calculation engines."""


class InvalidInputError(ValueError):
    """Input that the engines cannot compute a result for.

    Examples: an unsupported cable gauge, a room with no surface area,
    non-finite or negative room dimensions.
    """
