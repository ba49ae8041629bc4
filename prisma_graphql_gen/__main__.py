from prisma_graphql_gen.cli.cli import main

main()
