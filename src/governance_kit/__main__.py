from __future__ import annotations

from governance_kit.installer.main import main

if __name__ == "__main__":
    raise SystemExit(main())
