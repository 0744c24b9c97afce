"""Jinja2 rendering of Cloud Run manifests.

Templates are YAML files with Jinja2 expressions; the resolved
configuration is the template context. Rendering is a pure function of the
template text and the data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)

from .config_merge import ResolvedConfiguration
from .errors import ManifestRenderError, TemplateDataError


@dataclass(frozen=True)
class RenderedManifest:
    """A concrete manifest ready to hand to the deployment target."""

    kind: str
    name: str
    content: str
    document: dict[str, Any] = field(default_factory=dict, compare=False)


class ManifestRenderer:
    """Renders manifest templates against a resolved configuration."""

    def _environment(self, template_dir: Path) -> Environment:
        return Environment(
            loader=FileSystemLoader(template_dir),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
        )

    def render(
        self,
        template_path: Path,
        resolved: ResolvedConfiguration,
        expected_kind: str,
    ) -> RenderedManifest:
        """Render one template and validate the resulting document.

        Args:
            template_path: Path to the manifest template
            resolved: Resolved configuration used as template context
            expected_kind: Required ``kind`` of the rendered document

        Returns:
            RenderedManifest with the rendered text and parsed document

        Raises:
            TemplateDataError: If the template references a missing key
            ManifestRenderError: For any other rendering or validation failure
        """
        env = self._environment(template_path.parent)
        try:
            template = env.get_template(template_path.name)
            content = template.render(**resolved.as_dict())
        except TemplateNotFound as e:
            raise ManifestRenderError(
                f"Manifest template not found: {template_path}",
                resource=str(template_path),
            ) from e
        except UndefinedError as e:
            raise TemplateDataError(
                f"Template {template_path.name} references a missing configuration key",
                details=str(e),
                resource=str(template_path),
            ) from e
        except TemplateSyntaxError as e:
            raise ManifestRenderError(
                f"Syntax error in template {template_path.name} (line {e.lineno})",
                details=e.message,
                resource=str(template_path),
            ) from e

        try:
            document = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ManifestRenderError(
                f"Rendered {template_path.name} is not valid YAML",
                details=str(e),
                resource=str(template_path),
            ) from e

        if not isinstance(document, dict):
            raise ManifestRenderError(
                f"Rendered {template_path.name} is not a YAML mapping",
                resource=str(template_path),
            )

        kind = document.get("kind")
        if kind != expected_kind:
            raise ManifestRenderError(
                f"Rendered {template_path.name} has kind '{kind}', expected '{expected_kind}'",
                resource=str(template_path),
            )

        metadata = document.get("metadata") or {}
        name = metadata.get("name", "") if isinstance(metadata, dict) else ""
        return RenderedManifest(kind=kind, name=str(name), content=content, document=document)
