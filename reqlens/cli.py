"""
Command line interface for ReqLens
"""

import json
import os
import sys
from pathlib import Path
from typing import Optional

import click
import structlog
from rich.console import Console

from . import __version__
from .cache import Cache
from .collector import Collector
from .config import DEFAULT_API_URL, DEFAULT_CACHE_TTL, DEFAULT_TIMEOUT, ENV_PREFIX
from .enrichment import GeoLookup
from .errors import EnrichmentFailed
from .logs import configure_logging
from .models import RequestEnvelope
from .output import ConsoleOutput, JsonExporter


console = Console()
logger = structlog.get_logger(__name__)


@click.command(context_settings={'auto_envvar_prefix': ENV_PREFIX})
@click.option('--user-agent', help='Client User-Agent string')
@click.option('--client-ip', help='Client-IP header value')
@click.option('--forwarded-for', help='X-Forwarded-For header value')
@click.option('--remote-addr', help='Socket remote address')
@click.option('--referer', help='Referer URL')
@click.option('--method', help='Request method (GET, POST, ...)')
@click.option('--uri', help='Request URI')
@click.option('--host', help='Host header value')
@click.option('--https/--http', default=None,
              help='Whether the request arrived over HTTPS (default: HTTP)')
@click.option('--language', help='Accept-Language header value')
@click.option('--request-time', type=int,
              help='Request time as epoch seconds (default: now)')
@click.option('--width', help='Screen width reported by the frontend')
@click.option('--height', help='Screen height reported by the frontend')
@click.option('--from-env', is_flag=True,
              help='Read request fields from the CGI environment')
@click.option('--geo/--no-geo', default=True,
              help='Enable/disable geolocation lookup (default: enabled)')
@click.option('--strict', is_flag=True,
              help='Fail the whole collection when geolocation fails')
@click.option('-w', '--timeout', default=DEFAULT_TIMEOUT, type=float,
              help=f'Geolocation request timeout in seconds (default: {DEFAULT_TIMEOUT:g})')
@click.option('--api-url', default=DEFAULT_API_URL,
              help='Lookup URL template, {address} is replaced verbatim')
@click.option('--json', 'json_path', type=click.Path(),
              help='Export results to JSON file ("-" for stdout)')
@click.option('--no-cache', is_flag=True,
              help='Disable cache (always fetch fresh data)')
@click.option('--cache-ttl', default=DEFAULT_CACHE_TTL, type=int,
              help='Cache lifetime in seconds (default: 1 day)')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
@click.version_option(version=__version__)
def main(user_agent: Optional[str], client_ip: Optional[str],
         forwarded_for: Optional[str], remote_addr: Optional[str],
         referer: Optional[str], method: Optional[str], uri: Optional[str],
         host: Optional[str], https: Optional[bool], language: Optional[str],
         request_time: Optional[int], width: Optional[str], height: Optional[str],
         from_env: bool, geo: bool, strict: bool, timeout: float, api_url: str,
         json_path: Optional[str], no_cache: bool, cache_ttl: int, verbose: bool):
    """
    ReqLens - Request metadata collector.

    Collect client address, operating system, browser and request
    envelope fields, enriched with geolocation from ip-api.com.

    Examples:

        reqlens --remote-addr 8.8.8.8 --user-agent "Mozilla/5.0 (X11; Linux x86_64)"

        reqlens --from-env --json info.json

        reqlens --client-ip 1.1.1.1 --no-geo --json -
    """
    configure_logging(verbose=verbose)
    output = ConsoleOutput(console)

    fields = dict(
        user_agent=user_agent,
        client_ip=client_ip,
        forwarded_for=forwarded_for,
        remote_addr=remote_addr,
        referer=referer,
        method=method,
        uri=uri,
        host=host,
        https=https,
        accept_language=language,
        request_time=request_time,
        screen_width=width,
        screen_height=height,
    )

    if from_env:
        envelope = RequestEnvelope.from_environ(os.environ, **fields)
    else:
        envelope = RequestEnvelope(**{k: v for k, v in fields.items() if v is not None})

    cache = None if no_cache else Cache(ttl=cache_ttl)
    geo_lookup = GeoLookup(api_url=api_url, timeout=timeout) if geo else None

    try:
        collector = Collector(
            geo_lookup=geo_lookup,
            cache=cache,
            enable_geo=geo,
            strict=strict
        )
        info = collector.collect(envelope)

        if cache is not None:
            cache.save()

        if json_path:
            exporter = JsonExporter()
            if geo:
                exporter.add_data_source("ip-api.com")

            if json_path == '-':
                data = exporter.export(info)
                click.echo(json.dumps(data, indent=2, ensure_ascii=False))
                return

            json_file = Path(json_path)
            exporter.export(info, json_file)
            output.print_report(info)
            console.print(f"\n[dim]Results exported to:[/] {json_file.absolute()}")
        else:
            output.print_report(info)

    except EnrichmentFailed as e:
        output.print_error(f"Failed to retrieve IP information ({e.error.kind}): {e.error.message}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/]")
        sys.exit(130)
    except OSError as e:
        logger.error("collection_failed", error=str(e))
        output.print_error(str(e))
        sys.exit(1)
    finally:
        if geo_lookup is not None:
            geo_lookup.close()


if __name__ == '__main__':
    main()
