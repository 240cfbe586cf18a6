"""
Zone Chat Commands

Text front end for the zone manager:

    dead add [player|target] [radius]
    dead remove <index|all>
    dead list

Commands act on the region the host reports as current. Output is a list
of lines for the host to print.
"""

from typing import Callable, Optional

from .zone_manager import ZoneManager
from .zone_types import AnchorSource, ZoneOpStatus
from ..logging_utils import NavLogger

USAGE = "Usage: /vnav dead add [target] [radius] | remove <index|all> | list"
REMOVE_USAGE = "Usage: /vnav dead remove <index|all>"


class ZoneCommandHandler:
    """Parses ``dead`` subcommands and forwards them to a ZoneManager."""

    MODULE_NAME = "ZoneCommandHandler"

    def __init__(
        self,
        manager: ZoneManager,
        current_region: Callable[[], int],
        logger: Optional[NavLogger] = None,
    ):
        self.manager = manager
        self.current_region = current_region
        self.logger = logger or NavLogger(self.MODULE_NAME)

    def handle(self, args: str) -> list[str]:
        """Run one command line and return the lines to print."""
        if not args or not args.strip():
            return [USAGE]

        parts = args.split()
        sub = parts[0].lower()
        self.logger.log_input("command", subcommand=sub, args=parts[1:])

        if sub == "add":
            return self._add(parts[1:])
        if sub == "remove":
            return self._remove(parts[1:])
        if sub == "list":
            return self._list()
        return [f"Unknown subcommand. {USAGE}"]

    def _add(self, args: list[str]) -> list[str]:
        source = AnchorSource.PLAYER
        if args:
            try:
                source = AnchorSource.from_string(args[0])
                args = args[1:]
            except ValueError:
                pass
        radius = args[0] if args else None

        result = self.manager.add(
            self.current_region(),
            radius=radius,
            use_target=source is AnchorSource.TARGET,
        )
        lines = []
        if result.corrected:
            lines.append(f"Invalid radius value. Using default radius {self.manager.default_radius:g}.")
        lines.append(result.message)
        return lines

    def _remove(self, args: list[str]) -> list[str]:
        if not args:
            return [REMOVE_USAGE]
        return [self.manager.remove(self.current_region(), args[0]).message]

    def _list(self) -> list[str]:
        result = self.manager.list(self.current_region())
        if result.status is not ZoneOpStatus.LISTED:
            return [result.message]
        lines = [result.message]
        lines.extend(f"  {index}: {zone.describe()}" for index, zone in result.entries)
        return lines
