from scansion.cli import main

raise SystemExit(main())
