"""
Centralized logging configuration for proxy migrations.

Deployment and finalize steps are emitted as structured audit events through
structlog, so a failed migration can be traced back to the step and role
that failed. Records go to stderr; the CLI keeps stdout for its results.
"""
import logging
import sys
from typing import Any, Optional, TextIO

import structlog
from structlog.types import FilteringBoundLogger, Processor


def _shared_processors(include_timestamp: bool, include_caller: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if include_timestamp:
        chain.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    if include_caller:
        chain.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.MODULE,
                        structlog.processors.CallsiteParameter.LINENO]
        ))
    return chain


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None,
    stream: Optional[TextIO] = None
) -> None:
    """
    Configure structlog and the stdlib bridge for a migration run.

    Calling it again replaces the previous configuration, so a CLI invocation
    can switch between console and JSON output.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: Render JSON lines instead of the console renderer
        include_timestamp: Add an ISO-8601 UTC timestamp to each event
        include_caller: Add the emitting module and line number
        extra_processors: Processors inserted before the renderer
        stream: Destination stream, stderr by default
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(
        level=log_level,
        stream=stream or sys.stderr,
        format="%(message)s",
        force=True,
    )

    processors = _shared_processors(include_timestamp, include_caller)
    processors.extend(extra_processors or [])
    processors.append(
        structlog.processors.JSONRenderer() if format_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """Return a structlog logger for the given module name."""
    return structlog.get_logger(name)


def get_migration_logger(name: str) -> FilteringBoundLogger:
    """Return a logger bound to the migration audit trail."""
    return get_logger(name).bind(subsystem="migration", audit_trail=True)


def log_feature_resolution(
    logger: FilteringBoundLogger,
    role: str,
    address: str,
    deployed: bool,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Record how a feature role was resolved.

    Args:
        logger: Logger to bind the event fields onto
        role: Feature role name
        address: Address the role resolved to
        deployed: True if freshly deployed, False if an override was reused
        context: Extra fields, e.g. the artifact name
    """
    event = logger.bind(
        role=role,
        address=address,
        resolution="deployed" if deployed else "override",
    )
    if context:
        event = event.bind(context=context)

    event.info("Feature deployed" if deployed else "Feature override reused")


def log_finalize(
    logger: FilteringBoundLogger,
    proxy_address: str,
    controller_address: str,
    owner: str,
    roles: list[str],
    succeeded: bool,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Record the outcome of a finalize transaction.

    Failures are logged at error level with whatever context the caller
    collected (usually the revert reason).
    """
    event = logger.bind(
        proxy_address=proxy_address,
        controller_address=controller_address,
        owner=owner,
        roles=roles,
        finalize_result="SUCCESS" if succeeded else "FAILED",
    )
    if context:
        event = event.bind(context=context)

    if succeeded:
        event.info("Proxy finalized")
    else:
        event.error("Proxy finalize failed")
