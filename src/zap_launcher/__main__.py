"""Allow ``python -m zap_launcher``."""

from zap_launcher.cli import main

raise SystemExit(main())
