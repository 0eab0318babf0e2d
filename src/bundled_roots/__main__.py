from bundled_roots.main import main

main()
