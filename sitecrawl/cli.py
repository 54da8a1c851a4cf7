# sitecrawl/cli.py
#!/usr/bin/env python3
"""
Command line entry point for sitecrawl.

Commands:
  crawl SEED  Crawl every same-host page reachable from SEED and print the URLs
  hrefs [FILE] Print every href under <body> of an HTML document (stdin by default)
  config      Show the effective configuration

Common options:
  --config PATH       YAML/JSON config (default: configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only if omitted)
  --log-format FORMAT Logging format string

crawl options:
  --workers, -w N     Number of concurrent fetch workers (override workers)
  --timeout SEC       Per-request timeout (override timeout)
  --user-agent UA     User-Agent header (override user_agent)
  --json PATH         Save a JSON report
  --html PATH         Save an HTML report
  --template DIR      Directory with Jinja2 templates for --html
  --pretty            Indent the JSON report
  --crawl-timeout SEC Abort the whole crawl after SEC seconds

Example:
  sitecrawl crawl http://example.com/ --workers 8 --json crawl.json --pretty
"""
import asyncio
import sys
from pathlib import Path

import click

from sitecrawl import __version__
from sitecrawl.config import load_config
from sitecrawl.engine import start as start_crawl
from sitecrawl.errors import InvalidSeedURL, ParseError
from sitecrawl.logger import DEFAULT_FORMAT, init_logging
from sitecrawl.normalizer import canonical_seed
from sitecrawl.parser.html_parser import iter_hrefs
from sitecrawl.report import build_report
from sitecrawl.report.html_report import render_html
from sitecrawl.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='sitecrawl, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Format string for log records'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """sitecrawl command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Cannot load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('seed')
@click.option('--workers', '-w', 'workers', type=click.IntRange(min=1), default=None,
              help='Number of concurrent fetch workers')
@click.option('--timeout', 'timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Per-request timeout (seconds)')
@click.option('--user-agent', 'user_agent', default=None, help='User-Agent header')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save a JSON report to this file'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save an HTML report to this file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with Jinja2 templates (packaged template if omitted)'
)
@click.option('--pretty', is_flag=True, help='Indent the JSON report (2 spaces)')
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Timeout for the whole crawl (seconds)'
)
@click.pass_context
def crawl_command(ctx, seed, workers, timeout, user_agent, json_output, html_output,
                  template_dir, pretty, crawl_timeout):
    """Crawl SEED and print every discovered URL, one per line."""
    overrides = {k: v for k, v in (('workers', workers), ('timeout', timeout),
                                   ('user_agent', user_agent)) if v is not None}
    cfg = ctx.obj['config'].model_copy(update=overrides)

    try:
        seed = canonical_seed(seed)
    except InvalidSeedURL as e:
        print_error(f'Cannot start crawler: {e}')

    async def _runner():
        handle = await start_crawl(seed, config=cfg)
        frontier = await handle.wait()
        return frontier, handle.stats

    try:
        if crawl_timeout is not None:
            frontier, stats = asyncio.run(asyncio.wait_for(_runner(), timeout=crawl_timeout))
        else:
            frontier, stats = asyncio.run(_runner())
    except asyncio.TimeoutError:
        print_error(f'Crawl did not finish within {crawl_timeout} seconds')
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    for url in frontier:
        click.echo(url)

    if not json_output and not html_output:
        return

    report = build_report(seed, frontier, stats)

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}', err=True)
        except Exception as e:
            print_error(f'Cannot save JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(report, html_output, template_dir)
            click.echo(f'HTML report: {saved_html}', err=True)
        except Exception as e:
            print_error(f'Cannot save HTML report: {e}')


@cli.command('hrefs', context_settings=CONTEXT_SETTINGS)
@click.argument('stream', type=click.File('rb'), default='-')
def hrefs_command(stream):
    """Read one HTML document (stdin by default) and print every href under <body>."""
    try:
        for href in iter_hrefs(stream):
            click.echo(href)
    except ParseError as e:
        print_error(f'Cannot parse HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
