from __future__ import annotations

from gassight_build.cli import main

raise SystemExit(main())
