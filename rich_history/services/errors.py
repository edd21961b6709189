"""Exceptions raised by the rich history services."""

from typing import Optional


class RemoteError(RuntimeError):
    """The backend could not be reached or answered with something unusable."""

    def __init__(self, message: str, *, status: Optional[int] = None, url: Optional[str] = None) -> None:
        self.status = status
        self.url = url
        super().__init__(message)


class RegistryLookupMiss(LookupError):
    """A datasource uid or name is unknown to the registry."""

    def __init__(self, key: str, kind: str) -> None:
        self.key = key
        self.kind = kind
        super().__init__(f"No datasource with {kind} {key!r} in registry")
