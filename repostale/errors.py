"""Exception types. Everything except a missing token is absorbed somewhere."""


class RepostaleError(Exception):
    """Base for all repostale errors."""


class MissingTokenError(RepostaleError):
    """No access token in the environment or config file."""


class ListingError(RepostaleError):
    """A contents or repository listing could not be fetched."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path or '/'}: {reason}")
        self.path = path
        self.reason = reason


class FetchError(RepostaleError):
    """A project file download failed."""


class ProjectFileError(RepostaleError):
    """A project file is not well-formed XML."""
