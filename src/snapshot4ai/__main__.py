from snapshot4ai.main import main

main()
