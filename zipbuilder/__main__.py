from zipbuilder.cli.app import main

main()
