from fileserve.cli import main

main()
