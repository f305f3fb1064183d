import logging
import sys


class Log:
    """Centralized logging with structured format.

    Keyword arguments are rendered as sorted ``key=value`` pairs after the
    message, so call sites can attach document and strategy context.
    """

    _logger: logging.Logger = logging.getLogger("knowledge")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._logger.info(cls._render(message, context))

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._logger.error(cls._render(message, context))

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._logger.warning(cls._render(message, context))

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._logger.debug(cls._render(message, context))

    @classmethod
    def exception(cls, message: str, **context: object) -> None:
        """Log an error message with the active exception's traceback."""
        cls._logger.exception(cls._render(message, context))

    @staticmethod
    def _render(message: str, context: dict[str, object]) -> str:
        if not context:
            return message
        pairs = " ".join(f"{key}={context[key]}" for key in sorted(context))
        return f"{message} | {pairs}"
