"""Error taxonomy for the build and release stages.

Every fatal condition is a ``ReleaseError``. The CLI prints ``message`` and
``details`` and exits non-zero; no error is retried internally.
"""

from __future__ import annotations


class ReleaseError(Exception):
    """Raised when a build or release operation fails."""

    def __init__(
        self,
        message: str,
        details: str | None = None,
        *,
        stage: str | None = None,
        resource: str | None = None,
    ):
        self.message = message
        self.details = details
        self.stage = stage
        self.resource = resource
        super().__init__(message)

    def __str__(self) -> str:
        prefix = f"[{self.stage}] " if self.stage else ""
        return f"{prefix}{self.message}"


class ConfigurationError(ReleaseError):
    """A required input is missing or malformed. Raised before any side effect."""


class MissingEnvironmentConfigError(ReleaseError):
    """The values document for the requested environment does not exist."""


class ManifestRenderError(ReleaseError):
    """A manifest template could not be rendered into a valid document."""


class TemplateDataError(ManifestRenderError):
    """A template referenced a configuration key the resolved data lacks."""


class AuthenticationError(ReleaseError):
    """Credential activation or registry authentication failed."""


class ImageBuildError(ReleaseError):
    """The container image build failed."""


class ImagePushError(ReleaseError):
    """Pushing the container image to the registry failed."""


class JobDeployError(ReleaseError):
    """The runtime rejected the replace of the pre-deploy job."""


class JobExecutionFailure(ReleaseError):
    """The pre-deploy job ran and finished unsuccessfully."""


class ServiceDeployError(ReleaseError):
    """The runtime rejected the replace of the service."""


class EndpointLookupWarning(ReleaseError):
    """The service address could not be read after a successful replace.

    Collected as a warning on the outcome; never raised to the invoker.
    """
