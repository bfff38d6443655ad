from templatekit.cli.main import main

main()
