"""CLI entrypoint: Typer app definition and command registration"""

import typer

from pagemark.cli.commands import build_cmd, commit_cmd, export_cmd, init_cmd, list_cmd, toc_cmd


app = typer.Typer(name="pagemark", no_args_is_help=True, help="Paginate markdown-like books into HTML pages")

app.command(name="build")(build_cmd)
app.command(name="toc")(toc_cmd)
app.command(name="init")(init_cmd)
app.command(name="commit")(commit_cmd)
app.command(name="export")(export_cmd)
app.command(name="list")(list_cmd)
