from kira_dependencies.cli import main

main()
