#!/usr/bin/env python3
"""Command line client for DBChat."""
import typer
from typing import Optional
from typing_extensions import Annotated

from dbchat.common.settings import settings
from dbchat.datasources import DatabaseGateway
from dbchat.history import create_query_log_store
from dbchat.llm import ProviderConfig, ProviderRegistry, TranslationService
from dbchat.models import ConnectionDescriptor, QueryKind

from .console import console, print_success, render_rows
from .decorators import handle_cli_errors

app = typer.Typer(
    name="dbchat",
    help="Ask natural-language questions against MySQL, PostgreSQL and SQL Server.",
    no_args_is_help=True,
    add_completion=False,
)

# Shared Options
DatabaseTypeOption = Annotated[str, typer.Option(
    "--type", "-t", envvar="DBCHAT_DATABASE_TYPE", help="Database type: MYSQL, POSTGRESQL or MSSQL"
)]
ConnectionStringOption = Annotated[str, typer.Option(
    "--connection-string", "-c", envvar="DBCHAT_CONNECTION_STRING", help="Connection string or SQLAlchemy URL"
)]
NameOption = Annotated[str, typer.Option(
    "--name", "-n", envvar="DBCHAT_CONNECTION_NAME", help="Connection name used for query history"
)]


def _connection(name: str, database_type: str, connection_string: str) -> ConnectionDescriptor:
    return ConnectionDescriptor(name=name, database_type=database_type, connection_string=connection_string)


def _gateway() -> DatabaseGateway:
    return DatabaseGateway.from_settings(settings)


@app.callback()
def global_callback(
    env: Annotated[Optional[str], typer.Option("--env", "-e", help="Environment name; loads .env.<env>")] = None,
):
    """
    DBChat CLI Entry Point.
    """
    if env:
        settings.configure_env(env)


@app.command()
@handle_cli_errors
def test(
    database_type: DatabaseTypeOption,
    connection_string: ConnectionStringOption,
    name: NameOption = "default",
):
    """
    Check that the database is reachable.
    """
    _gateway().test_connection(_connection(name, database_type, connection_string))
    print_success(f"Connection '{name}' is reachable")


@app.command()
@handle_cli_errors
def schema(
    database_type: DatabaseTypeOption,
    connection_string: ConnectionStringOption,
    name: NameOption = "default",
):
    """
    Print the tables and columns visible to the connection.
    """
    db_schema = _gateway().get_schema(_connection(name, database_type, connection_string))
    for line in db_schema.raw:
        console.print(line, markup=False, highlight=False)


@app.command()
@handle_cli_errors
def query(
    sql: Annotated[str, typer.Argument(help="Query to execute verbatim")],
    database_type: DatabaseTypeOption,
    connection_string: ConnectionStringOption,
    name: NameOption = "default",
):
    """
    Execute a query and print the rows.
    """
    rows = _gateway().execute_query(_connection(name, database_type, connection_string), sql)
    render_rows(rows)


@app.command()
@handle_cli_errors
def ask(
    prompt: Annotated[str, typer.Argument(help="Natural language question")],
    database_type: DatabaseTypeOption,
    connection_string: ConnectionStringOption,
    provider: Annotated[str, typer.Option("--provider", "-p", help="Ollama, OpenAI, Anthropic or Google")],
    model: Annotated[str, typer.Option("--model", "-m", help="Provider model name")],
    name: NameOption = "default",
    execute: Annotated[bool, typer.Option("--execute", "-x", help="Run the generated query")] = False,
):
    """
    Translate a question into a query, optionally running it.
    """
    connection = _connection(name, database_type, connection_string)
    gateway = _gateway()
    translator = TranslationService(
        ProviderRegistry(ProviderConfig.from_settings(settings)),
        history_store=create_query_log_store(settings),
    )

    with console.status("Reading schema..."):
        db_schema = gateway.get_schema(connection)
    with console.status(f"Asking {provider}..."):
        result = translator.translate(prompt, db_schema, database_type, provider, model, connection_name=name)

    console.print(f"[info]Summary:[/info] {result.summary}")
    console.print("[info]Query:[/info]")
    console.print(result.query, markup=False, highlight=False)

    if execute:
        render_rows(gateway.execute_query(connection, result.query))


@app.command()
@handle_cli_errors
def history(
    name: NameOption = "default",
    favorites: Annotated[bool, typer.Option("--favorites", help="List favorites instead of history")] = False,
):
    """
    List recorded prompts for a connection.
    """
    store = create_query_log_store(settings)
    kind = QueryKind.FAVORITE if favorites else QueryKind.HISTORY
    entries = store.list(name, kind)
    if not entries:
        console.print(f"[warning]No {kind.value} entries for '{name}'.[/warning]")
        return
    render_rows(
        [["Time", "Prompt"]] + [[entry.timestamp.isoformat(timespec="seconds"), entry.full_prompt] for entry in entries],
        title=f"{kind.value.title()} for {name}",
    )


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Host to bind to")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port to bind to")] = 8000,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload (development)")] = False,
):
    """
    Start the HTTP API.
    """
    import uvicorn

    uvicorn.run("dbchat.api.main:app", host=host, port=port, reload=reload, log_level="info")


if __name__ == "__main__":
    app()
