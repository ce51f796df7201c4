"""Configuration commands for the gemgate CLI."""

import sys

import typer
from rich.console import Console
from rich.table import Table

from gemini_gateway.core.config import ConfigError, get_config, validate_all
from gemini_gateway.core.config.schema import ConfigSchema

app = typer.Typer(help="Configuration management")


@app.command()
def show() -> None:
    """Show the current configuration."""
    console = Console()

    try:
        config = get_config()
    except ConfigError as e:
        console.print(f"[red]❌ {e}[/red]")
        console.print("Run [cyan]gemgate config validate[/cyan] for the full report")
        sys.exit(1)

    table = Table(title="Gemini OpenAI Gateway Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Server URL", f"http://{config.host}:{config.port}")
    table.add_row("Log Level", config.log_level)
    table.add_row("Request Metrics Logging", "Enabled" if config.log_request_metrics else "Disabled")
    table.add_row("Gemini Base URL", config.base_url)
    table.add_row("API Keys", str(len(config.api_keys)))
    for position, key_hash in enumerate(config.api_key_hashes, start=1):
        table.add_row(f"  Key #{position}", key_hash)
    table.add_row("Request Timeout", f"{config.request_timeout}s")
    table.add_row("Max Retries", str(config.max_retries))
    table.add_row("Key Cooldown", f"{config.key_cooldown_seconds:g}s")
    table.add_row(
        "Client API Key Validation", "Enabled" if config.proxy_api_key else "Disabled"
    )

    console.print(table)


@app.command()
def validate() -> None:
    """Validate every environment variable the gateway reads."""
    console = Console()

    errors = validate_all()
    if errors:
        for error in errors:
            console.print(f"[red]❌ {error.env_var}[/red] = {error.value!r}: {error.message}")
        console.print(f"\n[red]{len(errors)} invalid setting(s)[/red]")
        sys.exit(1)

    console.print(
        f"[green]✅ All {len(ConfigSchema.all_specs())} settings are valid[/green]"
    )

    config = get_config()
    if not config.api_keys:
        console.print(
            "[yellow]⚠️  No Gemini API keys configured "
            "(set GEMINI_API_KEYS or GEMINI_API_KEY)[/yellow]"
        )
