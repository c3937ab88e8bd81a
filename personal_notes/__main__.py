from personal_notes.main import main

raise SystemExit(main())
