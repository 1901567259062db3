from promptpad.main import main

main()
