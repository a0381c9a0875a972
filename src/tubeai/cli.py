"""
Command-line interface for tubeai.

This module provides the CLI for running channel analyses, inspecting
configuration, validating API setup, and serving the HTTP API.
"""

import sys
import json
import logging
from pathlib import Path
from typing import Optional
from datetime import datetime

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.logging import RichHandler

from .config import Configuration
from .models import AnalysisResult
from .workflow import ChannelAnalyzer
from .error_handling import TubeAIError


console = Console()


def setup_cli_logging(log_level: str, log_file: Optional[Path] = None, verbose: bool = False):
    """
    Set up logging for CLI with rich formatting and optional file output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        verbose: Enable verbose console output
    """
    logging.getLogger().handlers.clear()

    console_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True
    )
    console_handler.setLevel(logging.DEBUG if verbose else getattr(logging, log_level))

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[console_handler]
    )

    # Third-party clients are chatty at DEBUG
    for noisy in ("httpx", "httpcore", "openai", "urllib3", "googleapiclient"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        logging.getLogger().addHandler(file_handler)


def display_config_table(config: Configuration):
    """Display configuration in a formatted table."""
    table = Table(title="TubeAI Configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    table.add_column("Description", style="green")

    descriptions = {
        'youtube_api_key': 'YouTube Data API v3 key',
        'openai_api_key': 'OpenAI API key',
        'news_api_key': 'NewsAPI key (optional)',
        'openai_model': 'Model for topics and ideas',
        'max_videos': 'Recent uploads to analyze',
        'request_timeout': 'Time limit per analysis (seconds)',
        'reddit_user_agent': 'User-Agent for Reddit requests',
        'log_level': 'Logging level',
        'log_file': 'Log file path',
        'debug': 'Debug mode enabled',
    }

    for key, value in config.to_dict().items():
        display_value = "[red]not set[/red]" if value is None and key.endswith('api_key') else str(value)
        table.add_row(key, display_value, descriptions.get(key, ''))

    console.print(table)


def display_analysis_result(result: AnalysisResult):
    """Display an analysis result as rich tables and panels."""
    console.print(Panel.fit(f"📺 {result.channel.title} ({result.channel.id})", style="bold cyan"))

    videos_table = Table(title=f"Recent Videos ({len(result.videos)})")
    videos_table.add_column("Published", style="cyan", no_wrap=True)
    videos_table.add_column("Title", style="white")
    for video in result.videos:
        videos_table.add_row(video.published_at[:10], video.title)
    console.print(videos_table)

    console.print(f"\n[bold]Topics:[/bold] {', '.join(result.topics)}")

    if result.news:
        news_table = Table(title=f"News ({len(result.news)})")
        news_table.add_column("Source", style="cyan")
        news_table.add_column("Headline", style="white")
        for item in result.news:
            news_table.add_row(item.source, item.title)
        console.print(news_table)
    else:
        console.print("[yellow]⚠[/yellow] No related news found")

    if result.discussion_items:
        reddit_table = Table(title=f"Reddit Discussions ({len(result.discussion_items)})")
        reddit_table.add_column("Score", style="magenta", justify="right")
        reddit_table.add_column("Subreddit", style="cyan")
        reddit_table.add_column("Title", style="white")
        for item in result.discussion_items:
            reddit_table.add_row(str(item.score), f"r/{item.subreddit}", item.title)
        console.print(reddit_table)
    else:
        console.print("[yellow]⚠[/yellow] No related Reddit discussions found")

    for i, idea in enumerate(result.ideas, 1):
        console.print(Panel(
            f"[bold]Thumbnail:[/bold] {idea.thumb_design}\n\n{idea.video_idea}",
            title=f"💡 Idea {i}: {idea.title}",
            title_align="left",
            style="green"
        ))


def init_config_if_needed(ctx) -> Configuration:
    """Initialize configuration and logging once per invocation."""
    if 'config' in ctx.obj:
        return ctx.obj['config']

    config_file = ctx.obj.get('config_file')
    debug = ctx.obj.get('debug', False)
    verbose = ctx.obj.get('verbose', False)
    log_file = ctx.obj.get('log_file')

    try:
        config = Configuration.load_config(config_file)
    except Exception as e:
        setup_cli_logging('INFO', None, verbose)
        console.print(f"[red]✗[/red] Configuration error: {str(e)}")
        if debug:
            console.print_exception()
        sys.exit(1)

    if debug:
        config.debug = True
        config.log_level = 'DEBUG'

    setup_cli_logging(config.log_level, log_file or config.log_file, verbose)
    ctx.obj['config'] = config

    if verbose:
        console.print("[green]✓[/green] Configuration loaded successfully")
        if config_file:
            console.print(f"[blue]ℹ[/blue] Using config file: {config_file}")

    return config


@click.group()
@click.option('--config-file', '-c', type=click.Path(exists=True, path_type=Path),
              help='Path to configuration file (.env format)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.option('--log-file', type=click.Path(path_type=Path),
              help='Path to log file (overrides config)')
@click.pass_context
def main(ctx, config_file: Optional[Path], verbose: bool, debug: bool, log_file: Optional[Path]):
    """
    TubeAI - content ideas for YouTube channels.

    Analyzes a channel's recent uploads, finds related news and Reddit
    discussions, and suggests five new video ideas.
    """
    ctx.ensure_object(dict)

    ctx.obj['verbose'] = verbose
    ctx.obj['debug'] = debug
    ctx.obj['config_file'] = config_file
    ctx.obj['log_file'] = log_file


@main.command()
@click.argument('channel_url')
@click.option('--channel-id', type=str, help='Pre-resolved channel ID (skips URL resolution)')
@click.option('--max-videos', type=int, help='Number of recent uploads to analyze')
@click.option('--openai-model', type=str, help='OpenAI model for topics and ideas')
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
@click.option('--output-file', '-o', type=click.Path(path_type=Path),
              help='Write the result as JSON to this file')
@click.pass_context
def analyze(ctx, channel_url: str, channel_id: Optional[str], max_videos: Optional[int],
            openai_model: Optional[str], as_json: bool, output_file: Optional[Path]):
    """
    Analyze CHANNEL_URL and suggest five video ideas.
    """
    config = init_config_if_needed(ctx)

    if max_videos:
        config.max_videos = max_videos
    if openai_model:
        config.openai_model = openai_model

    analyzer = ChannelAnalyzer(config)
    start_time = datetime.now()

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
            disable=as_json
        ) as progress:
            task = progress.add_task("Analyzing channel...", total=None)
            result = analyzer.analyze(channel_url, channel_id)
            progress.update(task, description="Analysis complete!")

    except TubeAIError as e:
        console.print(f"[red]✗[/red] {e.message}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]✗[/red] Analysis failed: {e}")
        if ctx.obj['debug']:
            console.print_exception()
        sys.exit(1)

    payload = result.model_dump(mode="json", by_alias=True)

    if output_file:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding='utf-8')

    if as_json:
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    display_analysis_result(result)

    execution_time = (datetime.now() - start_time).total_seconds()
    console.print(f"\n[green]✓[/green] Analysis finished in {execution_time:.1f}s")
    if output_file:
        console.print(f"[blue]ℹ[/blue] Result saved to {output_file}")


@main.command()
@click.pass_context
def config(ctx):
    """Display current configuration settings."""
    config = init_config_if_needed(ctx)

    console.print(Panel.fit("⚙️  Current Configuration", style="bold cyan"))
    display_config_table(config)

    if config.validate_api_keys():
        console.print("[green]✓[/green] Required API keys are configured")
    else:
        console.print("[red]✗[/red] Required API keys are missing")


@main.command()
@click.pass_context
def validate(ctx):
    """Validate configuration and build the API clients."""
    config = init_config_if_needed(ctx)

    console.print(Panel.fit("🔍 Validating Configuration and API Clients", style="bold yellow"))

    try:
        config.require_youtube_api_key()
        config.require_openai_api_key()
        console.print("[green]✓[/green] API keys present")
    except TubeAIError as e:
        console.print(f"[red]✗[/red] {e.message}")
        sys.exit(1)

    if not config.news_api_key:
        console.print("[yellow]⚠[/yellow] NEWS_API_KEY not set, news enrichment will be skipped")

    try:
        analyzer = ChannelAnalyzer(config)
        analyzer.ensure_collaborators()
        console.print("[green]✓[/green] YouTube, OpenAI, news and Reddit clients initialized")
    except Exception as e:
        console.print(f"[red]✗[/red] Client initialization failed: {e}")
        if ctx.obj['debug']:
            console.print_exception()
        sys.exit(1)

    console.print(Panel.fit("✅ All validations passed!", style="bold green"))


@main.command()
@click.option('--host', default='127.0.0.1', show_default=True, help='Interface to bind')
@click.option('--port', default=8000, show_default=True, type=int, help='Port to bind')
@click.pass_context
def serve(ctx, host: str, port: int):
    """Serve the analysis API over HTTP."""
    import uvicorn

    from .server import create_app

    config = init_config_if_needed(ctx)
    console.print(Panel.fit(f"🚀 Serving TubeAI API on http://{host}:{port}", style="bold blue"))
    uvicorn.run(create_app(config), host=host, port=port, log_config=None)


if __name__ == '__main__':
    main()
