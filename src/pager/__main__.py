"""Allow ``python -m pager``."""

from pager.cli import main

raise SystemExit(main())
