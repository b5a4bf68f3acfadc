from repomaster.cli import main

raise SystemExit(main())
