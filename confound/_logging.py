import logging
import structlog

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
)

logger = structlog.get_logger("confound")


def set_log_level(level: str = "info") -> None:
    """Set the minimum level of messages emitted by `confound.logger`

    Parameters
    ----------
    level : str
        one of "debug", "info", "warning", "error"
    """
    level_num = logging.getLevelName(level.upper())
    assert isinstance(level_num, int), f"Unknown log level: {level}"
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level_num)
    )
