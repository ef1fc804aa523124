"""
Extension Manifest Schemas.

Pydantic models describing an extension: its identity, version, the host
versions it adapts to, the extensions it requires and the settings fields the
admin panel renders for it. Manifests are frozen once validated.
"""

from enum import Enum
from typing import Any, Mapping, Optional

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)


class ManifestError(ValueError):
    """Raised when an extension manifest or its settings are invalid."""
    pass


# =============================================================================
# Version helpers
# =============================================================================


def to_specifier_set(constraint: str) -> SpecifierSet:
    """
    Convert a version constraint into a SpecifierSet.

    A bare version (``1.0.0``) or wildcard (``1.0.*``) means "==";
    ``*`` or an empty string matches everything. Comma-separated clauses
    combine, e.g. ``>=1.0,<2``.

    Raises:
        InvalidSpecifier: If a clause cannot be parsed.
    """
    clauses = [part.strip() for part in str(constraint).split(",") if part.strip()]
    if not clauses or clauses == ["*"]:
        return SpecifierSet("")

    converted = []
    for clause in clauses:
        if clause[0].isdigit():
            clause = f"=={clause}"
        converted.append(clause)
    return SpecifierSet(",".join(converted))


def version_satisfies(version: str, constraint: str) -> bool:
    """Check a version against a constraint; invalid input never satisfies."""
    try:
        return Version(version) in to_specifier_set(constraint)
    except (InvalidVersion, InvalidSpecifier):
        return False


# =============================================================================
# Config fields
# =============================================================================


class ConfigFieldType(str, Enum):
    """Input kinds the settings form can render."""

    TEXT = "text"
    TEXTAREA = "textarea"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    SELECT = "select"
    SWITCH = "switch"


OPTION_FIELD_TYPES = frozenset(
    {ConfigFieldType.RADIO, ConfigFieldType.CHECKBOX, ConfigFieldType.SELECT}
)


def _checkbox_values(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == ()


class ConfigField(BaseModel):
    """One settings field of an extension."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Setting key")
    title: str = Field("", description="Label shown in the form")
    type: ConfigFieldType = Field(..., description="Input kind")
    value: Any = Field(None, description="Default value")
    require: bool = Field(False, description="Whether a value is mandatory")
    options: dict[str, str] = Field(
        default_factory=dict, description="Choice value -> label")
    description: str = Field("", description="Help text")

    @field_validator("options", mode="before")
    @classmethod
    def _stringify_options(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {str(k): str(v) for k, v in value.items()}
        return value

    @model_validator(mode="after")
    def _check_options(self) -> "ConfigField":
        if self.type in OPTION_FIELD_TYPES:
            if not self.options:
                raise ValueError(
                    f"field '{self.name}' of type '{self.type.value}' requires options")
            try:
                self.coerce(self.value)
            except ManifestError as e:
                raise ValueError(f"default {e}")
        return self

    @property
    def has_options(self) -> bool:
        return self.type in OPTION_FIELD_TYPES

    def coerce(self, value: Any) -> Any:
        """
        Normalise a submitted value for this field.

        Raises:
            ManifestError: If the value is not allowed.
        """
        if self.type is ConfigFieldType.CHECKBOX:
            values = _checkbox_values(value)
            unknown = [v for v in values if v not in self.options]
            if unknown:
                raise ManifestError(
                    f"value for '{self.name}' has unknown options: {', '.join(unknown)}")
            return values

        if self.type in (ConfigFieldType.RADIO, ConfigFieldType.SELECT):
            if _is_empty(value):
                return ""
            if str(value) not in self.options:
                raise ManifestError(f"value for '{self.name}' must be one of the options")
            return str(value)

        if self.type is ConfigFieldType.SWITCH:
            if isinstance(value, str):
                return "1" if value.strip().lower() in ("1", "true", "on", "yes") else "0"
            return "1" if value else "0"

        return "" if value is None else str(value)


# =============================================================================
# Manifest
# =============================================================================


class ExtensionManifest(BaseModel):
    """Static descriptor of an extension."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, pattern=r"^[A-Za-z][A-Za-z0-9_\-]*$")
    title: str = Field(..., min_length=1)
    description: str = Field("", alias="introduce")
    author: str = ""
    author_site: Optional[str] = Field(None, alias="authorsite")
    author_email: Optional[str] = Field(None, alias="authoremail")
    version: str
    adaptation: str = "*"
    require: dict[str, str] = Field(default_factory=dict)
    config: list[ConfigField] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        try:
            Version(value)
        except InvalidVersion:
            raise ValueError(f"invalid version '{value}'")
        return value

    @field_validator("adaptation")
    @classmethod
    def _check_adaptation(cls, value: str) -> str:
        try:
            to_specifier_set(value)
        except InvalidSpecifier:
            raise ValueError(f"invalid host version range '{value}'")
        return value

    @field_validator("require", mode="before")
    @classmethod
    def _check_require(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            result = {}
            for name, constraint in value.items():
                try:
                    to_specifier_set(str(constraint))
                except InvalidSpecifier:
                    raise ValueError(f"invalid version range '{constraint}' for '{name}'")
                result[str(name)] = str(constraint)
            return result
        return value

    @model_validator(mode="after")
    def _check_unique_fields(self) -> "ExtensionManifest":
        seen: set[str] = set()
        for field in self.config:
            if field.name in seen:
                raise ValueError(f"duplicate config field '{field.name}'")
            seen.add(field.name)
        return self

    @classmethod
    def from_info(cls, info: Mapping[str, Any]) -> "ExtensionManifest":
        """
        Build a manifest from a raw info dict.

        Raises:
            ManifestError: If the info does not describe a valid extension.
        """
        try:
            return cls.model_validate(dict(info))
        except ValidationError as e:
            name = info.get("name", "<unnamed>") if isinstance(info, Mapping) else "<unnamed>"
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'manifest'}: {err['msg']}"
                for err in e.errors()
            )
            raise ManifestError(f"Invalid manifest for extension '{name}': {problems}") from e

    def get_field(self, name: str) -> Optional[ConfigField]:
        for field in self.config:
            if field.name == name:
                return field
        return None

    def is_compatible_with(self, host_version: str) -> bool:
        """Whether this extension adapts to the given host version."""
        return version_satisfies(host_version, self.adaptation)

    def default_config(self) -> dict[str, Any]:
        """Default settings keyed by field name."""
        return {field.name: field.coerce(field.value) for field in self.config}

    def validate_config(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """
        Validate submitted settings against the declared fields.

        Unknown keys are ignored; missing keys fall back to their defaults.

        Returns:
            dict: Normalised settings for every declared field.

        Raises:
            ManifestError: Listing every invalid or missing required field.
        """
        result: dict[str, Any] = {}
        problems: list[str] = []

        for field in self.config:
            raw = values.get(field.name, field.value)
            try:
                value = field.coerce(raw)
            except ManifestError as e:
                problems.append(str(e))
                continue
            if field.require and _is_empty(value):
                problems.append(f"'{field.name}' is required")
                continue
            result[field.name] = value

        if problems:
            raise ManifestError("; ".join(problems))
        return result
