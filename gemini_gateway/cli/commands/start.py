"""Start command for the gemgate CLI."""

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from gemini_gateway.core.config import get_config
from gemini_gateway.core.logging import normalize_log_level


def start(
    host: str = typer.Option(None, "--host", help="Override host"),
    port: int = typer.Option(None, "--port", help="Override port"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
) -> None:
    """Start the gateway server."""
    console = Console()
    config = get_config()

    # Override config if provided
    server_host = host or config.host
    server_port = port or config.port

    table = Table(title="Gemini OpenAI Gateway")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Server URL", f"http://{server_host}:{server_port}")
    table.add_row("Gemini Base URL", config.base_url)
    table.add_row("API Keys", ", ".join(config.api_key_hashes) or "[red]none[/red]")
    table.add_row("Max Retries", str(config.max_retries))
    table.add_row(
        "Client API Key Validation", "Enabled" if config.proxy_api_key else "Disabled"
    )

    console.print(table)

    uvicorn.run(
        "gemini_gateway.main:app",
        host=server_host,
        port=server_port,
        reload=reload,
        log_level=normalize_log_level(config.log_level).lower(),
    )
