"""Init command implementation."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, save_config

console = Console()


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "feedrank",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    report_threshold: int = typer.Option(5, "--report-threshold", help="Reports before an item is hidden"),
    category_cap: int = typer.Option(3, "--category-cap", help="Max items per primary category"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
) -> None:
    """Write a default feedrank configuration."""
    console.print(Panel.fit("feedrank - Initialization", style="bold blue"))

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"

    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists: {config_path} (use --force to overwrite)[/yellow]")
        raise typer.Exit(1)

    try:
        config = ConfigModel(
            ranking={"category_cap": category_cap},
            safety={"report_threshold": report_threshold},
        )
    except ValueError as e:
        console.print(f"[red]❌ Invalid settings: {e}[/red]")
        raise typer.Exit(1)

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")
    console.print(
        Panel(
            f"[green]✅ feedrank initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n\n"
            f"Next steps:\n"
            f"1. Tune weights and caps in the config file\n"
            f"2. Run: [bold]feedrank rank candidates.json --profile profile.json[/bold]",
            style="green",
        )
    )
