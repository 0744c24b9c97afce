"""Build and release stages for Cloud Run.

- identity: artifact reference resolution
- config_merge: layered values documents
- renderer: Jinja2 manifest rendering
- target: Cloud Run replace/execute/describe
- job_runner: pre-deploy job with blocking wait
- service_publisher: service replace and endpoint lookup
- image_builder: docker build and push
- orchestrator: release sequencing

Usage:
    from release_forge.deployment import build_cloud_run_orchestrator

    orchestrator = build_cloud_run_orchestrator(commands, paths, region, "app", "app-migration")
    outcome = orchestrator.release(request)
"""

from .config_merge import ConfigurationMerger, ResolvedConfiguration, deep_merge, merge
from .errors import (
    AuthenticationError,
    ConfigurationError,
    EndpointLookupWarning,
    ImageBuildError,
    ImagePushError,
    JobDeployError,
    JobExecutionFailure,
    ManifestRenderError,
    MissingEnvironmentConfigError,
    ReleaseError,
    ServiceDeployError,
    TemplateDataError,
)
from .identity import ArtifactReference, SelectorKind, resolve_artifact
from .image_builder import ImageBuilder
from .job_runner import JobExecutionResult, JobState, PreDeployJobRunner
from .orchestrator import (
    DeploymentOutcome,
    DeploymentRequest,
    ReleaseOrchestrator,
    build_cloud_run_orchestrator,
)
from .renderer import ManifestRenderer, RenderedManifest
from .service_publisher import PublishResult, ServicePublisher

__all__ = [
    "ArtifactReference",
    "AuthenticationError",
    "ConfigurationError",
    "ConfigurationMerger",
    "DeploymentOutcome",
    "DeploymentRequest",
    "EndpointLookupWarning",
    "ImageBuildError",
    "ImageBuilder",
    "ImagePushError",
    "JobDeployError",
    "JobExecutionFailure",
    "JobExecutionResult",
    "JobState",
    "ManifestRenderError",
    "ManifestRenderer",
    "MissingEnvironmentConfigError",
    "PreDeployJobRunner",
    "PublishResult",
    "ReleaseError",
    "ReleaseOrchestrator",
    "RenderedManifest",
    "ResolvedConfiguration",
    "SelectorKind",
    "ServiceDeployError",
    "ServicePublisher",
    "TemplateDataError",
    "build_cloud_run_orchestrator",
    "deep_merge",
    "merge",
    "resolve_artifact",
]
