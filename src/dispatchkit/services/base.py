"""BaseService — shared foundation for the scenario services.

Every service receives the resolved settings and, optionally, a loaded
:class:`PluginManager`.  Services own the whole run: they build one
discipline instance, feed it from a line source, write protocol lines to
a sink, and report the outcome as a ServiceResult.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from dispatchkit.domain.errors import DispatchError
from dispatchkit.services.io import ListSink
from dispatchkit.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from dispatchkit.config.settings import DispatchSettings
    from dispatchkit.plugins.manager import PluginManager
    from dispatchkit.services.io import LineSink, LineSource

logger = logging.getLogger(__name__)

INVALID_INPUT = "Invalid input"


class BaseService:
    """Base for the four scenario services.

    Usage::

        class BroadcastService(BaseService):
            op = "observe"

            def run(self, source, sink=None) -> ServiceResult:
                out = self._recorder(sink)
                ...
    """

    op = "run"

    def __init__(
        self,
        settings: DispatchSettings,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._plugins = plugins

    @property
    def halt_on_error(self) -> bool:
        return self._settings.halt_on_error

    def run(self, source: LineSource, sink: LineSink | None = None) -> ServiceResult:
        """Consume *source* to completion, writing protocol lines to *sink*."""
        raise NotImplementedError

    @staticmethod
    def _recorder(sink: LineSink | None) -> ListSink:
        """Wrap *sink* so every emitted line is also kept for the result."""
        return ListSink(sink.write_line if sink is not None else None)

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call a post-dispatch hook. No-op without plugins.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        hook_fn = getattr(self._plugins.hook, hook_name, None)
        if hook_fn is None:
            return
        try:
            hook_fn(**payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")

    def _ok(
        self,
        out: ListSink,
        warnings: list[str],
        **data: Any,
    ) -> ServiceResult:
        return ServiceResult(
            ok=True,
            op=self.op,
            data={"lines": out.lines, **data},
            warnings=warnings,
        )

    def _fail(
        self,
        out: ListSink,
        exc: DispatchError,
        warnings: list[str],
        **data: Any,
    ) -> ServiceResult:
        """Build a failure result; the lines emitted so far are kept."""
        detail: dict[str, Any] = {}
        extra = getattr(exc, "detail", None)
        if extra:
            detail["reason"] = extra
        logger.debug("%s halted: %s", self.op, exc)
        return ServiceResult(
            ok=False,
            op=self.op,
            data={"lines": out.lines, "halted": True, **data},
            warnings=warnings,
            error=ServiceError(code=exc.code, message=str(exc), detail=detail),
        )
