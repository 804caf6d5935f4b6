"""Base exception for the decision engine."""


class DomainException(Exception):
    """
    Root of every error the decision engine raises on purpose.

    ``code`` is the machine-readable identifier the error handler puts
    in the ``error`` field of the JSON response.
    """

    def __init__(self, message: str, code: str = "DECISION_ENGINE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)
