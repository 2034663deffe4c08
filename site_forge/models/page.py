"""Page descriptor model."""

from typing import Any, Dict, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from site_forge.exceptions import InvalidPageError


class Page(BaseModel):
    """A single renderable page: route, component and context."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Canonical route, unique within a registry")
    component: str = Field(..., description="Template/component the page renders with")
    context: Dict[str, Any] = Field(
        default_factory=dict, description="Data passed through to the component"
    )

    @field_validator('path', 'component')
    @classmethod
    def validate_not_empty(cls, v, info):
        """Path and component are required and cannot be blank."""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty")
        return v


def coerce_page(value: Union[Page, Mapping[str, Any]]) -> Page:
    """
    Turn a plugin-supplied value into a validated Page.

    Args:
        value: A Page, or a mapping with path/component/context keys

    Returns:
        The validated Page

    Raises:
        InvalidPageError: If the value is not a page or fails validation
    """
    if isinstance(value, Page):
        return value
    if not isinstance(value, Mapping):
        raise InvalidPageError(f"expected a page mapping, got {type(value).__name__}")

    try:
        return Page.model_validate(dict(value))
    except ValidationError as e:
        path = value.get("path")
        raise InvalidPageError(str(e), path=path if isinstance(path, str) else None) from e
