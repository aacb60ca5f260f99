"""CLI interface for AdMiro"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import click

from admiro.application.api_client import AdMiroApiClient
from admiro.domain.config import retry_config_from_dict
from admiro.domain.models.outcome import Outcome
from admiro.domain.models.request import RequestDescriptor
from admiro.infrastructure.config.config_manager import ConfigManager, ConfigurationError
from admiro.infrastructure.http_client import ResilientClient
from admiro.infrastructure.transport.factory import TransportFactory

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def parse_headers(values: Tuple[str, ...]) -> Dict[str, str]:
    """Parse 'Name: value' header options

    Raises:
        click.BadParameter: If a header has no colon
    """
    headers = {}
    for value in values:
        name, sep, header_value = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"Invalid header '{value}', expected 'Name: value'")
        headers[name.strip()] = header_value.strip()
    return headers


def _load_config(ctx: click.Context) -> ConfigManager:
    try:
        return ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=ctx.obj.get("verbose", False), exc=e)


def _create_client(
    config_manager: ConfigManager,
    transport_override: Optional[str] = None,
    max_retries: Optional[int] = None,
    base_delay_ms: Optional[int] = None,
) -> ResilientClient:
    """Create the resilient client from config plus CLI overrides

    Raises:
        ValueError: If the transport or retry settings are invalid
    """
    api_config = config_manager.get_api_config()
    retry_config = config_manager.get_retry_config()

    overrides = {}
    if max_retries is not None:
        overrides["max_retries"] = max_retries
    if base_delay_ms is not None:
        overrides["base_delay_ms"] = base_delay_ms
    if overrides:
        retry_config = retry_config_from_dict({**retry_config.model_dump(), **overrides})

    transport_type = transport_override or api_config.transport
    logger.debug(f"Using transport: {transport_type}")
    transport = TransportFactory.create(
        transport_type,
        {"base_url": api_config.base_url, "timeout": api_config.timeout},
    )
    return ResilientClient(transport, retry_config)


def _output_outcome(outcome: Outcome) -> None:
    """Print an outcome and exit non-zero on failure"""
    response = outcome.response
    if outcome.ok:
        click.echo(f"Status: {response.status_code}")
    elif response is not None:
        click.echo(f"ERROR: {outcome.detail}", err=True)
    else:
        click.echo(f"ERROR: {outcome.kind.value} failure: {outcome.detail}", err=True)

    if response is not None and response.content:
        try:
            click.echo(json.dumps(response.json(), indent=2))
        except ValueError:
            click.echo(response.text)

    if not outcome.ok:
        sys.exit(1)


async def _run_request(client: ResilientClient, descriptor: RequestDescriptor) -> Outcome:
    async with client:
        return await client.issue(descriptor)


async def _run_api_call(client: ResilientClient, token: Optional[str], method_name: str) -> Outcome:
    async with client:
        api = AdMiroApiClient(client, token=token)
        return await getattr(api, method_name)()


def _api_command(ctx: click.Context, method_name: str) -> None:
    verbose = ctx.obj.get("verbose", False)
    config_manager = _load_config(ctx)
    try:
        client = _create_client(config_manager)
        outcome = asyncio.run(
            _run_api_call(client, config_manager.get_api_config().token, method_name)
        )
    except click.ClickException:
        raise
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)
    _output_outcome(outcome)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .admiro.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """AdMiro - digital signage API client"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("method", type=str)
@click.argument("path", type=str)
@click.option("--data", "-d", type=str, help="JSON request body")
@click.option("--header", "-H", "headers", multiple=True, help="Extra header 'Name: value'")
@click.option("--max-retries", type=click.IntRange(min=0), help="Override retry.max_retries")
@click.option("--base-delay-ms", type=click.IntRange(min=1), help="Override retry.base_delay_ms")
@click.option(
    "--transport",
    type=click.Choice(list(TransportFactory.TRANSPORTS), case_sensitive=False),
    help="HTTP transport to use. Overrides config.",
)
@click.pass_context
def request(
    ctx,
    method: str,
    path: str,
    data: Optional[str],
    headers: Tuple[str, ...],
    max_retries: Optional[int],
    base_delay_ms: Optional[int],
    transport: Optional[str],
):
    """Send one request with retries.

    METHOD: HTTP method (GET, POST, ...)
    PATH: URL or path relative to the configured API base URL
    """
    verbose = ctx.obj.get("verbose", False)
    config_manager = _load_config(ctx)

    body = None
    if data is not None:
        try:
            body = json.loads(data)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"--data is not valid JSON: {e}") from e

    request_headers = {}
    token = config_manager.get_api_config().token
    if token:
        request_headers["Authorization"] = f"Bearer {token}"
    request_headers.update(parse_headers(headers))

    try:
        descriptor = RequestDescriptor(method=method, url=path, headers=request_headers, json=body)
        client = _create_client(config_manager, transport, max_retries, base_delay_ms)
        outcome = asyncio.run(_run_request(client, descriptor))
    except click.ClickException:
        raise
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)

    _output_outcome(outcome)


@cli.command()
@click.pass_context
def health(ctx):
    """Check that the API is up."""
    _api_command(ctx, "health")


@cli.command()
@click.pass_context
def displays(ctx):
    """List displays."""
    _api_command(ctx, "list_displays")


@cli.command()
@click.pass_context
def ads(ctx):
    """List advertisements."""
    _api_command(ctx, "list_ads")


@cli.command()
@click.pass_context
def loops(ctx):
    """List display loops."""
    _api_command(ctx, "list_loops")


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
