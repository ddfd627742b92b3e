"""CLI entrypoint: Typer app definition and command registration"""

import typer

from pagemigrate.cli.commands import (
    convert_cmd, history_cmd, import_md_cmd, init_cmd, migrate_cmd, put_html_cmd, set_cover_cmd, show_cmd,
)


app = typer.Typer(name="pagemigrate", no_args_is_help=True, help="Legacy HTML page to block-tree migration")

app.command(name="init")(init_cmd)
app.command(name="convert")(convert_cmd)
app.command(name="put-html")(put_html_cmd)
app.command(name="import-md")(import_md_cmd)
app.command(name="show")(show_cmd)
app.command(name="migrate")(migrate_cmd)
app.command(name="set-cover")(set_cover_cmd)
app.command(name="history")(history_cmd)
