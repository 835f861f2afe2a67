from runshell.cli import main

raise SystemExit(main())
