"""Error taxonomy shared by the store, the generation gateway and the API layer."""


class BlogGeneratorError(Exception):
    """Base error carrying the HTTP status it maps to at the request boundary."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BlogGeneratorError):
    """Bad user input: empty or oversized topic, missing id, bad filter."""

    status_code = 400


class NotFoundError(BlogGeneratorError):
    status_code = 404


class UpstreamError(BlogGeneratorError):
    """The text backend failed or returned nothing usable."""

    status_code = 500


class AuthError(BlogGeneratorError):
    """The text backend rejected (or was never given) its credential."""

    status_code = 500


class RateLimitError(BlogGeneratorError):
    status_code = 429


class EmptyContentError(UpstreamError, ValidationError):
    """Article content is blank after trimming.

    From the gateway this is an upstream failure; for callers handing content
    straight to a store it is invalid input, so both catch clauses apply.
    """
