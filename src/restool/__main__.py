from __future__ import annotations

from restool.cli_main import main

raise SystemExit(main())
