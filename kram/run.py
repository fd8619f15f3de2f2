from __future__ import annotations
import click
from .config import load_config, LOG_LEVELS
from .errors import InitError
from .kube.client import KubeSource, build_api_client
from .metrics.units import MemoryFormatter, MEMORY_FORMATS
from .reporting.engine import AggregationEngine, AggregationResult
from .reporting.table import render_table
from .util import logging as log
from .util.progress import Spinner, is_interactive, make_tracker

DEGRADED_EXIT_CODE = 3


def build_source(cfg) -> KubeSource:
    if cfg.credentials is not None:
        api_client = build_api_client(credentials=cfg.credentials)
    else:
        api_client = build_api_client(cfg.kubeconfig_path(), cfg.context)
    return KubeSource(api_client)


def print_result(result: AggregationResult, alternate: bool) -> None:
    if result.title:
        click.echo(result.title)
    click.echo(render_table(result.rows, alternate=alternate))
    if result.errors:
        click.echo('\nError(s):')
        for i, err in enumerate(result.errors, 1):
            click.echo(f'{i}. {err}')


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('namespace', required=False)
@click.option('--kubeconfig', default=None, help='Path to the kubeconfig file (default: ~/.kube/config)')
@click.option('--context', 'kube_context', default=None, help='Kubeconfig context to use')
@click.option('--config', 'config_path', default=None, help='Config file path (default: ~/.config/kram/config.yaml if present)')
@click.option('--memory-format', type=click.Choice(MEMORY_FORMATS), default=None, help='Memory units: binary (KiB, MiB) or decimal (kB, MB)')
@click.option('--alternate/--no-alternate', default=None, help='Shade every other table row')
@click.option('--no-progress', is_flag=True, help='Disable the spinner and progress bar')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None, help='Log level for stderr records')
@click.option('--fail-on-errors', is_flag=True, help=f'Exit with status {DEGRADED_EXIT_CODE} when any fetch failed')
@click.pass_context
def cli(ctx, namespace, kubeconfig, kube_context, config_path, memory_format, alternate, no_progress, log_level, fail_on_errors):
    """Show CPU and memory usage, requests and limits.

    Without NAMESPACE, prints one row per namespace. With NAMESPACE, prints
    one row per container of every pod in it, followed by a total.
    """
    try:
        cfg = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))
    if kubeconfig:
        cfg.kubeconfig = kubeconfig
        cfg.credentials = None
    if kube_context:
        cfg.context = kube_context
    if memory_format:
        cfg.display.memory_format = memory_format
    if alternate is not None:
        cfg.display.alternate_rows = alternate
    if no_progress:
        cfg.display.progress = False
    if log_level:
        cfg.logging.level = log_level.upper()
    log.configure_logging(cfg.logging.level, cfg.logging.format)

    interactive = cfg.display.progress and is_interactive()
    spinner = Spinner('Initialization running', enabled=interactive).start()
    ready = False
    try:
        source = build_source(cfg)
        ready = True
    except InitError as e:
        log.debug('initialization failed', error=str(e))
        raise click.ClickException(str(e))
    finally:
        spinner.stop('Initialization done' if ready else 'Initialization error', ok=ready)

    engine = AggregationEngine(
        source,
        formatter=MemoryFormatter(cfg.display.memory_format),
        track=make_tracker(interactive),
        exclude_namespaces=cfg.exclude_namespaces,
    )
    if namespace:
        result = engine.namespace_report(namespace)
    else:
        result = engine.list_namespaces_report()
    print_result(result, cfg.display.alternate_rows)
    if result.errors and fail_on_errors:
        ctx.exit(DEGRADED_EXIT_CODE)


if __name__ == '__main__':
    cli()
