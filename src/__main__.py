from postmeta.cli import app

app()
