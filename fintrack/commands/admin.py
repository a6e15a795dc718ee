"""Admin commands for initialization and backup."""

import shutil
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console

from fintrack.config import create_default_config, get_config_path, load_settings
from fintrack.errors import FintrackError
from fintrack.store.client import RecordStore
from fintrack.store.schema import database_exists

console = Console()


def init_command(force: bool = False) -> None:
    """Initialize fintrack database and configuration."""
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.print("[red]Initialization failed:[/red]", style="bold")
        console.print(f"  Config already exists: {config_path}")
        console.print("\n[yellow]Use 'fintrack init --force' to overwrite[/yellow]")
        sys.exit(1)

    try:
        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    db_path = load_settings(config_path).database

    try:
        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        # Opening creates the schema; existing records are kept
        with RecordStore(db_path):
            pass
        console.print("[green]✓[/green] Database initialized")
    except FintrackError as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def backup_command(output_dir: str | None = None) -> None:
    """Backup database and configuration files."""
    config_path = get_config_path()
    db_path = load_settings().database

    if not database_exists(db_path):
        console.print("[red]Database not found. Run 'fintrack init' first.[/red]", style="bold")
        sys.exit(1)

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = db_path.parent / "backups"

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    try:
        backup_dir.mkdir(parents=True, exist_ok=True)

        db_backup = backup_dir / f"fintrack_{timestamp}.db"
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            config_backup = backup_dir / f"config_{timestamp}.toml"
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)

    console.print("\n[green]Backup complete![/green]", style="bold")
    console.print(f"[dim]Backup directory: {backup_dir}[/dim]")
