"""Allow `python -m jarcheck`."""

from jarcheck.presentation.cli.main import main

raise SystemExit(main())
