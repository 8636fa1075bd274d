import logging
import sys

# Per-request lines from these libraries drown out pipeline logs at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3")


class Log:
    """Process-wide logging facade for the itemlister service.

    Background title generation runs on pool threads, so the thread name is
    part of every line.
    """

    _logger: logging.Logger = logging.getLogger("itemlister")

    @classmethod
    def configure(cls, log_level: str) -> None:
        level = log_level.upper()
        cls._logger.setLevel(level)
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s")
            )
            cls._logger.addHandler(handler)
            cls._logger.propagate = False
        if level != "DEBUG":
            for name in _CHATTY_LOGGERS:
                logging.getLogger(name).setLevel(logging.WARNING)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        cls._logger.debug(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Error with the active exception's traceback."""
        cls._logger.exception(message, extra=kwargs)
