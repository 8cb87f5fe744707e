"""Error types raised at the engine boundary."""


class InvalidParameter(ValueError):
    """A kernel parameter, step count or engine setting outside its valid range."""

    def __init__(self, name: str, value, reason: str):
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}={value!r}: {reason}")


__all__ = ["InvalidParameter"]
