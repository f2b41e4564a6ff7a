from __future__ import annotations

from angle_views.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
