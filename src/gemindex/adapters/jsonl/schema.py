"""Pydantic models describing one gemspec per JSON line."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from gemindex.domain.model import RUBY_PLATFORM, DependencyScope, GemSpecification


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class GemspecExportModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class DependencyPayload(GemspecExportModel):
    name: str
    requirement: str = Field(validation_alias=AliasChoices("requirement", "requirements"))
    scope: DependencyScope = Field(
        default=DependencyScope.RUNTIME,
        validation_alias=AliasChoices("scope", "type"),
    )

    @field_validator("scope", mode="before")
    @classmethod
    def _strip_symbol_prefix(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lstrip(":").lower()
        return value


class GemspecPayload(GemspecExportModel):
    name: str
    version: str
    platform: str = RUBY_PLATFORM
    dependencies: list[DependencyPayload | tuple[str, str]] = Field(default_factory=list)
    index_platform: str | None = Field(
        default=None,
        validation_alias=AliasChoices("index_platform", "indexPlatform"),
    )
    indexed: bool | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: object) -> object:
        if isinstance(value, int | float):
            return str(value)
        return value

    _normalize_index_platform = field_validator("index_platform", mode="before")(_blank_to_none)

    def to_gemspec(self) -> GemSpecification:
        return GemSpecification(
            name=self.name,
            version=self.version,
            platform=self.platform,
            dependencies=tuple(self.dependencies),
        )
