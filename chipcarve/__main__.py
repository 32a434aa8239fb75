from chipcarve.cli import main

raise SystemExit(main())
