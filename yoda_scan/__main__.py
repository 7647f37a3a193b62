from yoda_scan.cli import main

raise SystemExit(main())
