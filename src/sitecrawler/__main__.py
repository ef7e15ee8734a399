from sitecrawler.cli import main

raise SystemExit(main())
