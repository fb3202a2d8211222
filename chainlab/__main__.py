from __future__ import annotations

from chainlab.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
