"""Project registry: recognized project names and their restricted role lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import yaml
from instrukt_ai_logging import get_logger
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

logger = get_logger(__name__)


class RegistryError(Exception):
    """Raised when the project registry file cannot be loaded."""


class RegistryFile(BaseModel):
    model_config = ConfigDict(extra="forbid")
    projects: List[str]
    project_roles: Dict[str, List[str]] = {}

    @model_validator(mode="after")
    def validate_roles_reference_projects(self) -> "RegistryFile":
        seen: set[str] = set()
        for project in self.projects:
            if not project.strip():
                raise ValueError("Project names must not be empty")
            if project in seen:
                raise ValueError(f"Duplicate project name: {project}")
            seen.add(project)
        for project, roles in self.project_roles.items():
            if project not in seen:
                raise ValueError(f"Roles defined for unknown project: {project}")
            if not roles:
                raise ValueError(f"Role list for project {project} must not be empty")
        return self


@dataclass(frozen=True)
class ProjectRegistry:
    """Ordered project names plus the role names each restricted project accepts."""

    projects: tuple[str, ...]
    project_roles: dict[str, tuple[str, ...]] = field(default_factory=dict)
    source: Path | None = None

    def allowed_roles(self, project: str) -> tuple[str, ...] | None:
        """Return the restricted role names for a project, or None when any role is accepted."""
        return self.project_roles.get(project)


def load_project_registry(path: Path) -> ProjectRegistry:
    """Load and validate the project registry from a YAML file.

    Raises:
        RegistryError: The file is missing, not valid YAML, or has the wrong shape.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise RegistryError(f"Cannot read project registry {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise RegistryError(f"Invalid YAML in project registry {path}: {e}") from e

    try:
        parsed = RegistryFile.model_validate(raw if raw is not None else {})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors()
        )
        raise RegistryError(f"Invalid project registry {path}: {problems}") from e

    registry = ProjectRegistry(
        projects=tuple(parsed.projects),
        project_roles={project: tuple(roles) for project, roles in parsed.project_roles.items()},
        source=path,
    )
    logger.debug(
        "Loaded project registry from %s: %d project(s), %d restricted",
        path,
        len(registry.projects),
        len(registry.project_roles),
    )
    return registry
