"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy plugin loading and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import click

from dispatchkit.output.formatters import OutputSettings, format_result
from dispatchkit.output.renderers import error_line

if TYPE_CHECKING:
    from dispatchkit.config.settings import DispatchSettings
    from dispatchkit.plugins.manager import PluginManager
    from dispatchkit.services.base import BaseService
    from dispatchkit.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Plugins are discovered lazily on first use so ``--help`` and
    ``--version`` never import third-party plugin code.
    """

    def __init__(self, settings: DispatchSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None
        self._plugins_ready = False

        from dispatchkit.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def plugins(self) -> PluginManager | None:
        """The loaded plugin manager, or None when ``[plugins] enabled = false``."""
        if not self._plugins_ready:
            self._plugins_ready = True
            if self.settings.plugins.enabled:
                from dispatchkit.plugins.manager import PluginManager

                pm = PluginManager()
                local_dir = self.settings.root / self.settings.plugins.local_dir
                pm.discover_and_load(local_dir=local_dir)
                self._plugins = pm
        return self._plugins

    def run_scenario(self, service: BaseService, input_file: TextIO) -> None:
        """Drive *service* from *input_file* and emit its result."""
        from dispatchkit.services.io import TextLineSource

        self.emit(service.run(TextLineSource(input_file)))

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: protocol lines produced before the failure still go to
          stdout; the error goes to stderr and the exit code is 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        if result.ok:
            output = format_result(result, settings=settings)
            if output:
                click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output and not settings.quiet:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            return

        if settings.json_output:
            click.echo(format_result(result, settings=settings), err=True)
        else:
            if result.lines:
                click.echo("\n".join(result.lines))
            click.echo(error_line(result), err=True)
        raise SystemExit(1)
