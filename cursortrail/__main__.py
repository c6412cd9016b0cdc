from cursortrail.app import main

main()
