class OkxError(Exception):
    pass


class OkxHttpError(OkxError):
    """Transport failure or non-2xx response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class OkxApiError(OkxError):
    """Response parsed but carried a non-zero business code."""

    def __init__(self, message: str, code: object = None) -> None:
        super().__init__(message)
        self.code = code
