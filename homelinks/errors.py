class HomeLinksError(Exception):
    """Base class for errors raised by homelinks."""


class UploadError(HomeLinksError):
    pass
