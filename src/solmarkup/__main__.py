from solmarkup.cli import main

main()
