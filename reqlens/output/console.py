"""
Rich console output for ReqLens
"""

from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .. import __version__
from ..enrichment.geo_lookup import get_flag
from ..models import CollectedInfo


# Address type styling
IP_TYPE_STYLES = {
    'public': 'green',
    'private': 'dim',
    'cgnat': 'yellow',
    'loopback': 'dim',
    'linklocal': 'dim',
    'multicast': 'cyan',
    'reserved': 'yellow',
    'unknown': 'red',
}

# Provider payload fields shown in the location table, in display order
GEO_FIELDS = [
    ('country', 'Country'),
    ('regionName', 'Region'),
    ('city', 'City'),
    ('zip', 'Postal code'),
    ('timezone', 'Timezone'),
    ('isp', 'ISP'),
    ('org', 'Organization'),
    ('as', 'AS'),
]


class ConsoleOutput:
    """
    Rich console output for collected request information.

    Features:
    - Request summary panel
    - Client and request tables
    - Location table built from the provider payload
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_report(self, info: CollectedInfo):
        """Print the full report"""
        self.print_header(info)
        self.console.print(self._client_table(info))
        self.console.print(self._request_table(info))
        self.print_location(info)

    def print_header(self, info: CollectedInfo):
        """Print report header"""
        content = Text()
        content.append("🔍 ReqLens", style="bold cyan")
        content.append(f" v{__version__}\n", style="dim")
        content.append("Client: ", style="dim")
        content.append(info.ip or '-', style="bold")
        if info.ip_type:
            content.append(f" ({info.ip_type})", style=IP_TYPE_STYLES.get(info.ip_type, 'dim'))
        content.append("\n")
        content.append(f"{info.operating_system}  |  {info.browser}", style="dim")

        panel = Panel(content, border_style="cyan", padding=(0, 1))
        self.console.print(panel)

    def print_location(self, info: CollectedInfo):
        """Print geolocation table, or the reason it is missing"""
        if info.ip_info_error is not None:
            self.print_warning(
                f"Geolocation unavailable ({info.ip_info_error.kind}): "
                f"{info.ip_info_error.message}"
            )
            return

        if info.ip_info is None:
            return

        table = self._new_table("📍 Location")
        for key, label in GEO_FIELDS:
            value = info.ip_info.get(key)
            if value in (None, ''):
                continue
            if key == 'country':
                value = self._format_country(info.ip_info)
            table.add_row(label, str(value))

        lat, lon = info.ip_info.get('lat'), info.ip_info.get('lon')
        if lat is not None and lon is not None:
            table.add_row('Coordinates', f"{lat}, {lon}")

        self.console.print(table)

    def print_error(self, message: str):
        """Print error message"""
        self.console.print(f"[bold red]Error:[/] {message}")

    def print_warning(self, message: str):
        """Print warning message"""
        self.console.print(f"[yellow]Warning:[/] {message}")

    def _client_table(self, info: CollectedInfo) -> Table:
        table = self._new_table("💻 Client")
        table.add_row("IP", info.ip or '-')
        table.add_row("Operating system", info.operating_system)
        table.add_row("Browser", info.browser)
        table.add_row("Language", info.browser_language)
        table.add_row(
            "Screen",
            f"{info.screen_size.width} × {info.screen_size.height}"
        )
        table.add_row("User agent", info.user_agent)
        return table

    def _request_table(self, info: CollectedInfo) -> Table:
        table = self._new_table("📨 Request")
        table.add_row("Method", info.request_method or '-')
        table.add_row("Protocol", info.protocol)
        table.add_row("Host", info.host or '-')
        table.add_row("URI", info.request_uri or '-')
        table.add_row("Referer", info.referer or '-')
        table.add_row("Time", str(info.request_time))
        return table

    def _new_table(self, title: str) -> Table:
        table = Table(
            title=title,
            title_justify="left",
            show_header=False,
            box=box.ROUNDED,
            border_style="dim",
            padding=(0, 1)
        )
        table.add_column("Field", style="bold magenta", width=18)
        table.add_column("Value", overflow="fold")
        return table

    def _format_country(self, payload: dict[str, Any]) -> str:
        """Format country with flag"""
        country = payload.get('country') or '-'
        flag = get_flag(payload.get('countryCode'))
        return f"{flag} {country}" if flag else country
