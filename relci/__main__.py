from relci.cli.app import main

main()
