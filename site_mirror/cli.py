# === FILE: site_mirror/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point of the SiteMirror website mirroring tool.

Commands:
  run [ROOT_URL]   Mirror a site into the output directory
  config           Show the effective configuration

Global options:
  --config PATH       YAML/JSON config file (values are overridden by run options)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only if not given)
  --log-format FORMAT Logging format (e.g. "%(asctime)s %(levelname)s %(message)s")

run options:
  --output DIR        Output directory (default: output)
  --strategy NAME     worklist (default) or recursive
  --scope NAME        origin (default) or prefix
  --naming NAME       hashed (default) or relative
  --concurrency N     Pages fetched in parallel
  --max-depth N       Link depth limit
  --max-pages N       Page limit
  --timeout SEC       Timeout of one request
  --user-agent UA     User-Agent header
  --retry-times N     Retries on 5xx/429
  --lenient-status    Keep bodies of non-2xx answers
  --report PATH       Save a JSON summary of the run

Also:
  --version, -v       Show the SiteMirror version

Example:
  site-mirror run https://example.com -o mirror --max-depth 3 --report mirror.json
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from site_mirror import __version__
from site_mirror.config import MirrorConfig, build_config, read_config_data
from site_mirror.engine import start_mirror
from site_mirror.errors import MirrorError
from site_mirror.logger import DEFAULT_FORMAT, init_logging
from site_mirror.report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _make_config(ctx, **overrides) -> MirrorConfig:
    try:
        return build_config(ctx.obj['data'], **overrides)
    except ValidationError as e:
        print_error(f'Invalid configuration: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteMirror, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML or JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stdout only if not given)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteMirror command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        data = read_config_data(config_path)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['data'] = data


@cli.command('run', context_settings=CONTEXT_SETTINGS)
@click.argument('root_url', required=False)
@click.option(
    '--output', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Output directory  [default: output]'
)
@click.option('--strategy', type=click.Choice(['worklist', 'recursive']), default=None,
              help='Crawl driver  [default: worklist]')
@click.option('--scope', type=click.Choice(['origin', 'prefix']), default=None,
              help='Which links are followed  [default: origin]')
@click.option('--naming', type=click.Choice(['hashed', 'relative']), default=None,
              help='Child directory names  [default: hashed]')
@click.option('--concurrency', type=int, default=None, help='Pages fetched in parallel')
@click.option('--max-depth', 'max_depth', type=int, default=None, help='Link depth limit')
@click.option('--max-pages', 'max_pages', type=int, default=None, help='Page limit')
@click.option('--timeout', type=float, default=None, help='Timeout of one request (seconds)')
@click.option('--user-agent', 'user_agent', default=None, help='User-Agent header')
@click.option('--retry-times', 'retry_times', type=int, default=None, help='Retries on 5xx/429')
@click.option('--lenient-status', is_flag=True, help='Keep bodies of non-2xx answers')
@click.option(
    '--report', '-r', 'report_path',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save a JSON summary of the run'
)
@click.pass_context
def run(ctx, root_url, output_dir, strategy, scope, naming, concurrency, max_depth,
        max_pages, timeout, user_agent, retry_times, lenient_status, report_path):
    """Mirror ROOT_URL (or root_url from the config file)."""
    cfg = _make_config(
        ctx,
        root_url=root_url,
        output_dir=output_dir,
        strategy=strategy,
        scope=scope,
        naming=naming,
        concurrency=concurrency,
        max_depth=max_depth,
        max_pages=max_pages,
        timeout=timeout,
        user_agent=user_agent,
        retry_times=retry_times,
        strict_status=False if lenient_status else None,
    )
    click.echo(f'Mirroring {cfg.root_url} into {cfg.output_dir}')
    try:
        report = asyncio.run(start_mirror(cfg))
    except MirrorError as e:
        print_error(f'Mirror aborted: {e}')
    except Exception as e:
        print_error(f'Error while mirroring: {e}')

    click.echo(
        f'Mirrored {len(report.pages)} pages, {len(report.failures)} failed, '
        f'{report.asset_failure_count} assets skipped'
    )
    for failure in report.failures:
        click.secho(f'  {failure.url}: {failure.error}', fg='yellow', err=True)

    if report_path:
        try:
            saved = render_json(report, report_path)
            click.echo(f'JSON report: {saved}')
        except OSError as e:
            print_error(f'Failed to save JSON report: {e}')

    if report.root_failed:
        sys.exit(1)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.argument('root_url', required=False)
@click.pass_context
def show_config(ctx, root_url):
    """Show the effective configuration as JSON."""
    cfg = _make_config(ctx, root_url=root_url)
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
