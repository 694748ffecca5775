"""Configuration for the governance installer.

Ambient options are loaded from:
- environment variables (prefixed with `GOVERNANCE_KIT_`)
- and a local `.env` file (if present)

CLI flags are layered on top and frozen into an `InvocationConfig` that is
passed explicitly to every component.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from governance_kit.installer.errors import ConfigError

DEFAULT_GUIDANCE_PATH = "docs/governance"
DEFAULT_ANNOTATE_GLOB = "**/*.bsl"
DEFAULT_ANNOTATE_MAX_BYTES = 1024 * 1024


class GovernanceKitSettings(BaseSettings):
    """Settings for the installer.

    Environment variables:
    - GOVERNANCE_KIT_LOG_LEVEL
    - GOVERNANCE_KIT_GUIDANCE_PATH
    - GOVERNANCE_KIT_TOOL_DIR
    - GOVERNANCE_KIT_MAX_SEARCH_LEVELS
    - GOVERNANCE_KIT_ANNOTATE_GLOB
    - GOVERNANCE_KIT_ANNOTATE_MAX_BYTES

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `GovernanceKitSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        description="Root logging level",
    )
    guidance_path: str = Field(
        default=DEFAULT_GUIDANCE_PATH,
        description="Project-relative location of the guidance payload the shim points to",
    )
    tool_dir: Path | None = Field(
        default=None,
        description=(
            "Guidance checkout the installer runs from; detection starts at its parent. "
            "When unset, the current working directory is used and inspected itself."
        ),
    )
    max_search_levels: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many ancestor directories root detection inspects",
    )
    annotate_glob: str = Field(
        default=DEFAULT_ANNOTATE_GLOB,
        description="Glob (relative to the project root) selecting files to annotate",
    )
    annotate_max_bytes: int = Field(
        default=DEFAULT_ANNOTATE_MAX_BYTES,
        gt=0,
        description="Files larger than this are never annotated",
    )

    model_config = SettingsConfigDict(
        env_prefix="GOVERNANCE_KIT_",
        env_file=".env",
        extra="ignore",
    )

    def resolved_tool_dir(self) -> Path:
        return (self.tool_dir or Path.cwd()).resolve()


class InvocationConfig(BaseModel):
    """The resolved, immutable option set for one run."""

    model_config = ConfigDict(frozen=True)

    project_root: Path | None = None
    guidance_path: str = DEFAULT_GUIDANCE_PATH
    dry_run: bool = False
    force: bool = False
    enable_ci: bool = False
    annotate_sources: bool = False

    tool_dir: Path = Field(default_factory=Path.cwd)
    include_tool_dir: bool = False
    max_search_levels: int = Field(default=3, ge=1)
    annotate_glob: str = DEFAULT_ANNOTATE_GLOB
    annotate_max_bytes: int = Field(default=DEFAULT_ANNOTATE_MAX_BYTES, gt=0)

    @field_validator("guidance_path")
    @classmethod
    def _normalize_guidance_path(cls, value: str) -> str:
        raw = value.strip().replace("\\", "/")
        if not raw:
            raise ValueError("guidance path must not be empty")
        path = PurePosixPath(raw)
        if path.is_absolute() or (len(raw) > 1 and raw[1] == ":"):
            raise ValueError(f"guidance path must be relative to the project root: {value!r}")
        if ".." in path.parts:
            raise ValueError(f"guidance path must not leave the project root: {value!r}")
        normalized = path.as_posix()
        return "." if normalized in {"", "."} else normalized

    @field_validator("annotate_glob")
    @classmethod
    def _check_annotate_glob(cls, value: str) -> str:
        pattern = value.strip()
        if not pattern:
            raise ValueError("annotation glob must not be empty")
        if pattern.startswith(("/", "\\")):
            raise ValueError(f"annotation glob must be relative to the project root: {value!r}")
        if ".." in PurePosixPath(pattern.replace("\\", "/")).parts:
            raise ValueError(f"annotation glob must not leave the project root: {value!r}")
        return pattern

    @classmethod
    def from_settings(
        cls,
        settings: GovernanceKitSettings,
        *,
        project_root: Path | None = None,
        guidance_path: str | None = None,
        dry_run: bool = False,
        force: bool = False,
        enable_ci: bool = False,
        annotate_sources: bool = False,
    ) -> InvocationConfig:
        """Layer CLI flags over ambient settings.

        Raises:
            ConfigError: if the combined options do not validate.
        """

        try:
            return cls(
                project_root=project_root,
                guidance_path=guidance_path if guidance_path is not None else settings.guidance_path,
                dry_run=dry_run,
                force=force,
                enable_ci=enable_ci,
                annotate_sources=annotate_sources,
                tool_dir=settings.resolved_tool_dir(),
                include_tool_dir=settings.tool_dir is None,
                max_search_levels=settings.max_search_levels,
                annotate_glob=settings.annotate_glob,
                annotate_max_bytes=settings.annotate_max_bytes,
            )
        except ValidationError as e:
            raise ConfigError(str(e)) from e
