"""Command-line interface for interval backup."""

import logging
import sys
import threading
import click
from typing import Optional

from .config.config_manager import ConfigManager
from .core.events import RunStateEvent
from .core.models import BackupConfig, Interval
from .core.scheduler import BackupScheduler
from .core.size_inspector import SizeInspector
from .utils.formatters import apply_time_locale


EVENT_LABELS = {
    RunStateEvent.SUCCESS_COUNT: "Backups",
    RunStateEvent.FAILURE_COUNT: "Errors",
    RunStateEvent.ELAPSED: "Time elapsed",
    RunStateEvent.FOLDER_SIZE: "Backup folder size",
}


def setup_logging(level: str, log_file: Optional[str] = None):
    """Set up logging configuration."""
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')
    
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except Exception as e:
            click.echo(f"Warning: Could not set up file logging: {e}", err=True)


def _load_settings(ctx) -> ConfigManager:
    config_manager = ConfigManager(ctx.obj.get('config_path'))
    config_manager.load_config()
    return config_manager


class _IntervalType(click.ParamType):
    """Accepts an interval name (TEN) or its length in minutes (10)."""
    name = "interval"
    
    def convert(self, value, param, ctx):
        try:
            return Interval.from_value(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


INTERVAL = _IntervalType()


@click.group()
@click.option('--config', '-c', 'config_path',
              help='Path to settings file (.json or .yaml)')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level (defaults to the settings file, then WARNING)')
@click.option('--log-file',
              help='Log file path')
@click.pass_context
def cli(ctx, config_path: Optional[str], log_level: Optional[str], log_file: Optional[str]):
    """Interval Backup - copy a folder into timestamped snapshots on a schedule."""
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path
    ctx.obj['log_level'] = log_level
    ctx.obj['log_file'] = log_file


def _wait_until_interrupted():
    threading.Event().wait()


def _configure_logging(ctx, config_manager: Optional[ConfigManager] = None):
    logging_config = config_manager.get_logging_config() if config_manager else {}
    level = ctx.obj.get('log_level') or logging_config.get('level') or 'WARNING'
    log_file = ctx.obj.get('log_file') or logging_config.get('file')
    setup_logging(level, log_file)


@cli.command()
@click.option('--source', '-s', type=click.Path(file_okay=False), help='Folder to back up')
@click.option('--backup', '-b', type=click.Path(file_okay=False), help='Folder receiving snapshots')
@click.option('--interval', '-i', type=INTERVAL, help='Interval name or minutes')
@click.pass_context
def run(ctx, source: Optional[str], backup: Optional[str], interval: Optional[Interval]):
    """Start scheduled backups and report progress until Ctrl-C."""
    try:
        config_manager = _load_settings(ctx)
        _configure_logging(ctx, config_manager)
        
        settings = config_manager.get_backup_config()
        config = BackupConfig(
            source_dir=source or settings.source_dir,
            backup_dir=backup or settings.backup_dir,
            interval=interval or settings.interval
        )
        apply_time_locale(config_manager.config_data.get('language'))
    except Exception as e:
        click.echo(f"Error loading settings: {e}", err=True)
        sys.exit(1)
    
    scheduler = BackupScheduler()
    
    def on_change(event: RunStateEvent, value):
        if event is RunStateEvent.ELAPSED:
            click.echo(f"\r⏱️  {EVENT_LABELS[event]}: {value}", nl=False)
        else:
            click.echo(f"\n{EVENT_LABELS[event]}: {value}")
    
    click.echo(f"📂 Source: {config.source_dir}")
    click.echo(f"💾 Backup folder: {config.backup_dir}")
    click.echo(f"🕒 Interval: {config.interval.minutes} minutes "
               f"(first snapshot after one full interval)")
    click.echo("Press Ctrl-C to stop.")
    
    try:
        scheduler.state.subscribe(on_change)
        scheduler.start(config)
        _wait_until_interrupted()
    except KeyboardInterrupt:
        pass
    except Exception as e:
        click.echo(f"\nError during backup run: {e}", err=True)
        scheduler.stop()
        sys.exit(1)
    
    scheduler.state.unsubscribe(on_change)
    summary = scheduler.state.snapshot()
    scheduler.stop()
    
    click.echo("\n\n📊 Summary:")
    for event in RunStateEvent:
        click.echo(f"  {EVENT_LABELS[event]}: {summary[event.value] or '-'}")


@cli.command()
@click.argument('path', type=click.Path())
@click.pass_context
def size(ctx, path: str):
    """Show the total size of a folder."""
    _configure_logging(ctx)
    inspector = SizeInspector()
    
    total = inspector.total_bytes(path)
    if total is None:
        click.echo(f"Error: path does not exist: {path}", err=True)
        sys.exit(1)
    
    click.echo(f"{inspector.display_size(path)} ({total:,} bytes)")


@cli.command()
@click.option('--source', '-s', help='Folder to back up')
@click.option('--backup', '-b', help='Folder receiving snapshots')
@click.option('--interval', '-i', type=INTERVAL, help='Interval name or minutes')
@click.option('--language', '-l', help='Language tag, e.g. en or de')
@click.pass_context
def configure(ctx, source: Optional[str], backup: Optional[str],
              interval: Optional[Interval], language: Optional[str]):
    """Change and save the stored settings."""
    try:
        config_manager = _load_settings(ctx)
        _configure_logging(ctx, config_manager)
        
        config_manager.update_settings(
            source_dir=source,
            backup_dir=backup,
            interval=interval.name if interval else None,
            language=language
        )
        
        click.echo(f"✅ Settings saved to {config_manager.config_path}")
    
    except Exception as e:
        click.echo(f"❌ Could not save settings: {e}", err=True)
        sys.exit(1)


@cli.command('show-config')
@click.pass_context
def show_config(ctx):
    """Show the effective settings."""
    try:
        config_manager = _load_settings(ctx)
        config = config_manager.get_backup_config()
        
        click.echo(f"Settings file: {config_manager.config_path or 'defaults (not saved yet)'}")
        click.echo(f"   📂 Source: {config.source_dir}")
        click.echo(f"   💾 Backup folder: {config.backup_dir}")
        click.echo(f"   🕒 Interval: {config.interval.name} ({config.interval.minutes} minutes)")
        click.echo(f"   🌐 Language: {config_manager.config_data.get('language')}")
    
    except Exception as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)


@cli.command()
def intervals():
    """List the available backup intervals."""
    for interval in Interval:
        click.echo(f"{interval.name:<20} {interval.minutes:>4} minutes")


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()
