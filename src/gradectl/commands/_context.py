"""AppContext: the object every command receives via ``@click.pass_obj``.

The root group registers it with ``ctx.with_resource`` so the store
closes with the root context. Result emission routes output to stdout or
stderr and sets the exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import structlog

from gradectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from gradectl.config.settings import GradeSettings
    from gradectl.infrastructure.store import GradeStore
    from gradectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is created on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: GradeSettings) -> None:
        self.settings = settings
        self._store: GradeStore | None = None

        from gradectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from gradectl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> GradeStore:
        """The store instance (created lazily on first access)."""
        if self._store is None:
            from gradectl.infrastructure.store import GradeStore

            self._store = GradeStore(self.settings)
            structlog.get_logger("gradectl.cli").debug(
                "store.opened", backend=self.settings.store.backend
            )
        return self._store

    @property
    def user(self) -> str:
        """The requesting user's identity token.

        Raises:
            click.UsageError: No identity was given via ``--user``,
                ``GRADECTL_USER``, or ``user`` in gradectl.toml.
        """
        user = (self.settings.user or "").strip()
        if not user:
            msg = "No user identity. Pass --user or set GRADECTL_USER."
            raise click.UsageError(msg)
        return user

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout, returns normally. Warnings go to
          stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

    def __enter__(self) -> AppContext:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()
