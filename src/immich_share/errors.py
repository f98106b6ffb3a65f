"""HTTP-facing error type with stable error codes."""


class ApiError(Exception):
    """An error rendered to the browser as ``{"error": code}``.

    Codes are opaque keys the client resolves to localized text, so they
    must stay stable across releases.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(code)
        self.status_code = status_code
        self.code = code
        self.headers = headers
