"""Managed governance artifacts.

Every artifact's content is a pure function of the `InvocationConfig`: no
timestamps, no environment lookups. That is what makes repeated `--force`
runs converge to identical bytes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from governance_kit.installer.config import InvocationConfig

SHIM_PATH = "AGENTS.md"
POLICY_PATH = ".governance/policy.json"
EDITOR_SETTINGS_PATH = ".vscode/settings.json"
PR_TEMPLATE_PATH = ".github/pull_request_template.md"
CI_WORKFLOW_PATH = ".github/workflows/governance.yml"

POLICY_SCHEMA_VERSION = 1


@dataclass(frozen=True, slots=True)
class ManagedArtifact:
    name: str
    path: str
    content: str


def render_discovery_shim(config: InvocationConfig) -> str:
    guidance = config.guidance_path
    return "\n".join(
        [
            "# Agent and contributor guidance",
            "",
            "This project follows shared development governance.",
            f"The guidance lives in [`{guidance}`]({guidance}/); read it before changing code.",
            "",
            f"- Policy (machine-readable): [`{POLICY_PATH}`]({POLICY_PATH})",
            f"- Pull request checklist: [`{PR_TEMPLATE_PATH}`]({PR_TEMPLATE_PATH})",
            "",
            "<!-- Managed by governance-kit. Re-run the installer with --force to refresh. -->",
            "",
        ]
    )


def build_policy(config: InvocationConfig) -> dict[str, Any]:
    return {
        "schemaVersion": POLICY_SCHEMA_VERSION,
        "managedBy": "governance-kit",
        "guidancePath": config.guidance_path,
        "discoveryShim": SHIM_PATH,
        "pullRequestTemplate": PR_TEMPLATE_PATH,
        "ciGate": {
            "enabled": config.enable_ci,
            "workflow": CI_WORKFLOW_PATH if config.enable_ci else None,
        },
        "sourceAnnotations": {
            "enabled": config.annotate_sources,
            "glob": config.annotate_glob,
        },
    }


def render_policy(config: InvocationConfig) -> str:
    return json.dumps(build_policy(config), indent=2, ensure_ascii=False) + "\n"


def editor_settings_fragment(config: InvocationConfig) -> dict[str, Any]:
    """Keys this installer owns inside the editor settings file."""

    return {
        "governanceKit.guidancePath": config.guidance_path,
        "governanceKit.policyFile": POLICY_PATH,
        "files.insertFinalNewline": True,
        "files.trimTrailingWhitespace": True,
    }


def render_pr_template(config: InvocationConfig) -> str:
    guidance = config.guidance_path
    return "\n".join(
        [
            "## Summary",
            "",
            "<!-- What does this change do, and why? -->",
            "",
            "## Governance checklist",
            "",
            f"- [ ] I read the relevant guidance in `{guidance}`",
            "- [ ] The change follows the naming and structure conventions",
            "- [ ] New or changed behaviour is covered by tests or a manual check described below",
            "- [ ] No generated or binary files are committed by accident",
            "",
            "## Verification",
            "",
            "<!-- How did you check this works? -->",
            "",
        ]
    )


def render_ci_workflow(config: InvocationConfig) -> str:
    guidance = config.guidance_path
    return "\n".join(
        [
            "# Managed by governance-kit. Re-run the installer with --force to refresh.",
            "name: governance",
            "",
            "on:",
            "  pull_request:",
            "  push:",
            "    branches: [main]",
            "",
            "jobs:",
            "  policy:",
            "    runs-on: ubuntu-latest",
            "    steps:",
            "      - uses: actions/checkout@v4",
            "        with:",
            "          submodules: true",
            "      - name: Check governance artifacts are present",
            "        run: |",
            f"          test -f {SHIM_PATH}",
            f"          test -f {POLICY_PATH}",
            f"          test -f {PR_TEMPLATE_PATH}",
            f"          test -d {guidance}",
            "",
        ]
    )


def file_artifacts(config: InvocationConfig) -> list[ManagedArtifact]:
    """Artifacts written whole by the file provisioner, in provisioning order.

    The editor settings are merged rather than written and are not listed.
    """

    artifacts = [
        ManagedArtifact(name="discovery-shim", path=SHIM_PATH, content=render_discovery_shim(config)),
        ManagedArtifact(name="policy", path=POLICY_PATH, content=render_policy(config)),
        ManagedArtifact(
            name="pr-template", path=PR_TEMPLATE_PATH, content=render_pr_template(config)
        ),
    ]
    if config.enable_ci:
        artifacts.append(
            ManagedArtifact(
                name="ci-workflow", path=CI_WORKFLOW_PATH, content=render_ci_workflow(config)
            )
        )
    return artifacts
