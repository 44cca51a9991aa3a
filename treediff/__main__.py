from treediff.cli import app

app()
