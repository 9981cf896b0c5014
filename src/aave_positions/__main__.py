from .handler import cli

cli()
