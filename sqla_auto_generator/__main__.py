from sqla_auto_generator.cli import main

main()
