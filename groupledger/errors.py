class InvalidInputError(ValueError):
    """Malformed or inconsistent data rejected before it reaches the balance/bill engines."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
