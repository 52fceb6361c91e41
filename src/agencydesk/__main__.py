from agencydesk.cli.app import app

app()
