"""Exception hierarchy for wikit."""

from __future__ import annotations


class WikitError(Exception):
    """Base class for errors reported to the user."""


class ConfigError(WikitError):
    """Invalid or missing configuration."""


class ApiError(WikitError):
    """The remote API answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"GraphQL error {status_code}: {body}")


class GraphQLError(WikitError):
    """The remote API returned GraphQL errors."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = messages
        super().__init__("GraphQL errors:\n" + "\n".join(messages))


class BatchFailedError(WikitError):
    """Every item of a batch operation failed."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class TransportError(WikitError):
    """The remote API could not be reached."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(f"Cannot reach {url}: {reason}")
