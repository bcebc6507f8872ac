# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Log output for the ``fillsense`` CLI and for applications embedding it.

The classifiers only ever call ``logging.getLogger(__name__)`` and log their
decisions at DEBUG; importing fillsense configures nothing.  The CLI (or a
host application) calls :func:`configure` once to route those stdlib
records, and any structlog loggers bound by the host, through one
structlog formatter on stderr so stdout stays reserved for JSON results.

Leaf module: no fillsense imports.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog
from structlog.typing import Processor


def _shared_processors() -> list[Processor]:
    """Processors applied to both structlog and foreign (stdlib) records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.UnicodeDecoder(),
    ]


def _render_chain(json_output: bool, stream: TextIO) -> list[Processor]:
    if json_output:
        # Tracebacks as structured data so log pipelines can index them.
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    colors = bool(getattr(stream, "isatty", lambda: False)())
    return [structlog.dev.ConsoleRenderer(colors=colors)]


def configure(*, json_output: bool = False, level: str = "INFO", stream: TextIO | None = None) -> None:
    """Install a single structlog-formatted handler on the root logger.

    Args:
        json_output: JSON lines (``--json-logs``) instead of console output.
        level: Root level name; unknown names fall back to INFO.
        stream: Destination, ``sys.stderr`` by default.  Console colours are
            only used when it is a terminal.

    Calling it again replaces the previous handler instead of adding one.
    """
    out = stream if stream is not None else sys.stderr
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_chain(json_output, out),
            ],
            foreign_pre_chain=shared,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
