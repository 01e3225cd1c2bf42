"""
Error types raised by the steganography engine
"""


class StegoError(ValueError):
    """Base class for every failure the engine reports."""


class InvalidImageFormat(StegoError):
    pass


class UnsupportedOutputFormat(StegoError):
    pass


class InvalidFileEntry(StegoError):
    pass


class InsufficientCapacity(StegoError):
    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Image too small: payload needs {required} bytes, carrier holds {available} bytes"
        )


class NoHiddenDataOrWrongPassword(StegoError):
    """
    Nothing recoverable in the carrier.

    Callers only ever see this type. The subclasses below exist so the codec
    can report where parsing stopped, and are collapsed by ``unveil``.
    """

    def __init__(self, message: str = "No hidden data found or wrong password"):
        super().__init__(message)


class InvalidContainerHeader(NoHiddenDataOrWrongPassword):
    pass


class CorruptContainer(NoHiddenDataOrWrongPassword):
    pass


class DecryptionFailed(NoHiddenDataOrWrongPassword):
    pass
