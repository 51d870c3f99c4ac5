"""Contributor record schema, built at runtime from the project registry.

The watch controller reloads this module when its source changes, so the
model is always obtained through :func:`build_contributor_model`.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    StringConstraints,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    create_model,
)
from pydantic_core import PydanticCustomError

from contribcheck.project_registry import ProjectRegistry
from contribcheck.socials import ContactEntry, transform_social


def collapse_union(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    """Report a failed union as one ``invalid_union`` issue.

    The per-branch failures are kept under ``ctx["issues"]`` so callers can
    still look inside them.
    """
    try:
        return handler(value)
    except ValidationError as e:
        raise PydanticCustomError(
            "invalid_union",
            "Invalid input",
            {"issues": e.errors(include_url=False)},
        ) from e


Contact = Annotated[
    Union[HttpUrl, ContactEntry],
    WrapValidator(collapse_union),
    AfterValidator(transform_social),
]


def role_entry_type(project: str, roles: tuple[str, ...] | None) -> Any:
    """Return the annotated type for one role entry of a project.

    A role entry is either a bare role name or ``{role, details}``. When the
    project restricts its roles, the name must be one of ``roles``.
    """
    role_type: Any = Literal[roles] if roles else str
    detail_model = create_model(
        "RoleDetail",
        __config__=ConfigDict(title=f"{project} role"),
        role=(role_type, ...),
        details=(str, ...),
    )
    return Annotated[Union[role_type, detail_model], WrapValidator(collapse_union)]


def build_roles_model(registry: ProjectRegistry) -> type[BaseModel]:
    """Build the ``roles`` model: one list field per project, no other keys."""
    fields: dict[str, Any] = {}
    for index, project in enumerate(registry.projects):
        entry = role_entry_type(project, registry.allowed_roles(project))
        fields[f"project_{index}"] = (List[entry], Field(default_factory=list, alias=project))
    return create_model("Roles", __config__=ConfigDict(extra="forbid"), **fields)


def build_contributor_model(registry: ProjectRegistry) -> type[BaseModel]:
    """Build the contributor record model for the given registry."""
    return create_model(
        "Contributor",
        name=(Annotated[str, StringConstraints(min_length=1)], ...),
        avatar=(str, ...),
        roles=(build_roles_model(registry), ...),
        contacts=(List[Contact], Field(default_factory=list)),
    )


def required_fields(model: type[BaseModel]) -> list[str]:
    """Names of the model's fields that have no default."""
    return [name for name, info in model.model_fields.items() if info.is_required()]
