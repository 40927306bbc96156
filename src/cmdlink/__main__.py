from cmdlink.cli import main

main()
