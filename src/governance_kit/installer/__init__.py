"""The provisioning engine behind the `governance-kit` command.

- Settings loaded from the environment and `.env`
- Structured logging
- Root detection, file provisioning, settings merge and source annotation
- A sequential orchestrator tying them together
"""
