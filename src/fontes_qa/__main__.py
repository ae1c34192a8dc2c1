from fontes_qa.cli import main

main()
