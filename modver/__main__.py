from modver.cli.app import main

main()
