from worm_scan.cli import main

raise SystemExit(main())
