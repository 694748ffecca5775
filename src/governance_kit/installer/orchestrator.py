"""Run the provisioning steps for one installer invocation."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from governance_kit.installer.artifacts import (
    EDITOR_SETTINGS_PATH,
    POLICY_PATH,
    ManagedArtifact,
    editor_settings_fragment,
    file_artifacts,
)
from governance_kit.installer.config import InvocationConfig
from governance_kit.installer.errors import ArtifactWriteError, ConfigError
from governance_kit.installer.provisioning import (
    AnnotationMarker,
    annotate_files,
    ensure_file,
    merge_settings,
)
from governance_kit.installer.root_resolver import resolve_project_root
from governance_kit.installer.workflow import RunState, RunTracker

logger = logging.getLogger(__name__)

FAILED_VERB = "failed"


@dataclass(frozen=True, slots=True)
class ArtifactOutcome:
    """What happened (or would happen) to one artifact or annotated file."""

    name: str
    path: str
    action: str
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True, slots=True)
class RunReport:
    project_root: Path
    state: RunState
    outcomes: tuple[ArtifactOutcome, ...]
    dry_run: bool

    @property
    def failed(self) -> bool:
        return self.state is RunState.FAILED


class Orchestrator:
    """Provision the governance artifacts into a project.

    Steps run strictly in sequence. A write failure is scoped to its artifact:
    nothing already written is rolled back and the remaining artifacts are
    still attempted. Every artifact is idempotent, so a second run completes
    whatever failed before.
    """

    def __init__(self, config: InvocationConfig, *, tracker: RunTracker | None = None) -> None:
        self.config = config
        self.tracker = tracker or RunTracker()

    def run(self) -> RunReport:
        """Run every provisioning step.

        Raises:
            ConfigError: if the explicit project root is unusable. Nothing has
                been written at that point.
        """

        config = self.config
        self.tracker.advance(RunState.RESOLVING_ROOT)
        try:
            root = resolve_project_root(
                config.tool_dir,
                override=config.project_root,
                max_levels=config.max_search_levels,
                include_tool_dir=config.include_tool_dir,
            )
        except ConfigError:
            self.tracker.fail()
            raise

        logger.info(
            "Provisioning governance artifacts",
            extra={"project_root": str(root), "dry_run": config.dry_run, "force": config.force},
        )
        self.tracker.advance(RunState.PROVISIONING_ARTIFACTS)

        self._warn_on_guidance_drift(root)

        artifacts = {artifact.name: artifact for artifact in file_artifacts(config)}
        outcomes: list[ArtifactOutcome] = [
            self._provision_file(root, artifacts["discovery-shim"]),
            self._provision_file(root, artifacts["policy"]),
            self._merge_editor_settings(root),
            self._provision_file(root, artifacts["pr-template"]),
        ]

        if config.enable_ci:
            outcomes.append(self._provision_file(root, artifacts["ci-workflow"]))

        if config.annotate_sources:
            outcomes.extend(self._annotate_sources(root))

        final = RunState.FAILED if any(o.failed for o in outcomes) else RunState.DONE
        self.tracker.advance(final)

        report = RunReport(
            project_root=root, state=final, outcomes=tuple(outcomes), dry_run=config.dry_run
        )
        logger.info(
            "Provisioning finished",
            extra={"state": final.value, "artifacts": len(outcomes)},
        )
        return report

    def _guarded(
        self, name: str, root: Path, relative: str, step: Callable[[Path], str]
    ) -> ArtifactOutcome:
        target = root / relative
        try:
            verb = step(target)
        except OSError as e:
            error = ArtifactWriteError(path=target, cause=e)
            logger.error(str(error), extra={"artifact": name, "path": str(target)})
            return ArtifactOutcome(name=name, path=relative, action=FAILED_VERB, error=str(error))

        logger.info(
            "Artifact processed", extra={"artifact": name, "path": relative, "action": verb}
        )
        return ArtifactOutcome(name=name, path=relative, action=verb)

    def _provision_file(self, root: Path, artifact: ManagedArtifact) -> ArtifactOutcome:
        def step(target: Path) -> str:
            action = ensure_file(
                target,
                artifact.content,
                dry_run=self.config.dry_run,
                force=self.config.force,
            )
            return action.value

        return self._guarded(artifact.name, root, artifact.path, step)

    def _merge_editor_settings(self, root: Path) -> ArtifactOutcome:
        def step(target: Path) -> str:
            result = merge_settings(
                target, editor_settings_fragment(self.config), dry_run=self.config.dry_run
            )
            return result.action.value

        return self._guarded("editor-settings", root, EDITOR_SETTINGS_PATH, step)

    def _annotate_sources(self, root: Path) -> list[ArtifactOutcome]:
        marker = AnnotationMarker.for_guidance(self.config.guidance_path)
        try:
            results = annotate_files(
                root,
                self.config.annotate_glob,
                marker,
                self.config.annotate_max_bytes,
                dry_run=self.config.dry_run,
            )
        except OSError as e:
            logger.error(
                "Could not enumerate source files", extra={"path": str(root), "error": str(e)}
            )
            return [
                ArtifactOutcome(
                    name="annotation",
                    path=self.config.annotate_glob,
                    action=FAILED_VERB,
                    error=str(e),
                )
            ]

        return [
            ArtifactOutcome(
                name="annotation",
                path=result.file.relative_to(root).as_posix(),
                action=result.action.value,
                error=result.error,
            )
            for result in results
        ]

    def _warn_on_guidance_drift(self, root: Path) -> None:
        """Tell the operator when an existing policy points somewhere else."""

        policy_path = root / POLICY_PATH
        if self.config.force or not policy_path.exists():
            return

        try:
            raw = json.loads(policy_path.read_text(encoding="utf-8-sig"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            logger.warning(
                "Existing policy file is unreadable or not valid JSON; ignoring it",
                extra={"path": str(policy_path)},
            )
            return

        recorded = raw.get("guidancePath") if isinstance(raw, dict) else None
        if recorded != self.config.guidance_path:
            logger.warning(
                "Existing policy points to a different guidance path; re-run with --force to update",
                extra={
                    "path": str(policy_path),
                    "recorded": recorded,
                    "configured": self.config.guidance_path,
                },
            )
