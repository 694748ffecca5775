"""governance-kit.

Installs shared development-governance conventions into a host project:
- a discovery shim pointing agents and contributors at the guidance
- a machine-readable policy file
- editor settings (merged, never replaced)
- a pull request template
- optionally a CI workflow and source-file annotations
"""

__version__ = "0.1.0"

from governance_kit.installer.config import GovernanceKitSettings, InvocationConfig

__all__ = ["__version__", "GovernanceKitSettings", "InvocationConfig"]
