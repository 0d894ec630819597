class OperatorHubError(Exception):
    """Base class for every error that aborts a run."""


class ConfigError(OperatorHubError):
    pass


class ManifestError(OperatorHubError):
    pass


class NotFoundError(ManifestError):
    """The download service has no such manifest for the requested version."""


class DecodeError(OperatorHubError):
    pass


class RenderError(OperatorHubError):
    pass


class DigestError(OperatorHubError):
    pass
