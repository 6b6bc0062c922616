from locations_mcp.ui.cli import run

run()
