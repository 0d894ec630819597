from operatorhub.cli import main

main()
