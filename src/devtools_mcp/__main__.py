from devtools_mcp import main

main()
