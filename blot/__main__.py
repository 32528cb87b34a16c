from blot.cli import main

raise SystemExit(main())
