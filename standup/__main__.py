from standup.cli.main import main

main()
