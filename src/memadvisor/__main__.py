from memadvisor.cli import main

main()
