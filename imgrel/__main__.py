from imgrel.cli.app import main

main()
