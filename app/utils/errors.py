class ValidationError(ValueError):
    """A submission is missing a required field. Surfaced as HTTP 400."""

    def __init__(self, message: str = "Data missing", kind: str = "unknown"):
        super().__init__(message)
        self.message = message
        self.kind = kind
