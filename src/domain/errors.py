class DomainError(Exception):
    """
    Business rule violation raised by use cases.

    ``code`` is a stable machine-readable identifier (e.g. ``ROLE_IN_USE``)
    that the API layer maps to an HTTP status.
    """

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"DomainError(code={self.code!r}, message={self.message!r})"
