"""
Unified logging with deduplication.

The planner ticks at a fixed rate, so the same failure (no pose, no target in
range...) tends to repeat on every tick. Repeats of the last event are counted
instead of re-emitted; the count is reported once a different event arrives.

Any logger exposing info/warning/error/debug works (stdlib logging.Logger or a
host-provided one).
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class LogLevel(Enum):
    INFO = auto()
    WARN = auto()
    ERROR = auto()
    DEBUG = auto()


@dataclass
class LogEvent:
    message: str
    source: str
    level: LogLevel
    counter: int = 0
    exception: Optional[Exception] = None

    def same_identity(self, other: "LogEvent") -> bool:
        return (
            self.level == other.level and
            self.source == other.source and
            self.message == other.message
        )

    def render(self) -> str:
        if self.level == LogLevel.ERROR and self.exception is not None:
            return f"Error in {self.source}: {str(self.exception)}. {self.message}".strip()
        return f"{self.source}: {self.message}".strip() if self.source else self.message

#--------------------------------------------------------------------------------
def log_event(
    logger,
    event: LogEvent,
    last_event: Optional[LogEvent] = None,
) -> LogEvent:
    """
    Unified logging with dedup multiplier. Use ONE shared last_event variable.

    Behavior:
    - If event is same as last_event: increment counter, emit nothing
    - Else: report how often the previous event repeated (if it did),
      emit the new event, reset counter to 0
    """
    if last_event is not None and last_event.same_identity(event):
        event.counter = last_event.counter + 1
        return event

    if last_event is not None and last_event.counter > 0:
        logger.debug(f"previous message repeated x {last_event.counter}")

    # DEBUG events are checked first so noisy telemetry stays cheap
    if event.level == LogLevel.DEBUG:
        logger.debug(event.render())
    elif event.level == LogLevel.ERROR:
        logger.error(event.render())
    elif event.level == LogLevel.WARN:
        logger.warning(event.render())
    else:
        logger.info(event.render())

    event.counter = 0
    return event

#--------------------------------------------------------------------------------
# Convenience wrappers
def log_info(logger, message: str, source: str = "", last_event: Optional[LogEvent] = None) -> LogEvent:
    return log_event(logger, LogEvent(message=message, source=source, level=LogLevel.INFO), last_event)

#--------------------------------------------------------------------------------
def log_warn(logger, message: str, source: str = "", last_event: Optional[LogEvent] = None) -> LogEvent:
    return log_event(logger, LogEvent(message=message, source=source, level=LogLevel.WARN), last_event)

#--------------------------------------------------------------------------------
def log_debug(logger, message: str, source: str = "", last_event: Optional[LogEvent] = None) -> LogEvent:
    return log_event(logger, LogEvent(message=message, source=source, level=LogLevel.DEBUG), last_event)

#--------------------------------------------------------------------------------
def log_error(logger, error: Exception, source: str, message: str = "", last_event: Optional[LogEvent] = None) -> LogEvent:
    return log_event(logger, LogEvent(message=message, source=source, level=LogLevel.ERROR, exception=error), last_event)
