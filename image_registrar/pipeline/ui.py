"""User-facing progress reporting"""

from typing import Protocol

from loguru import logger


class ProgressSink(Protocol):
    def say(self, message: str) -> None:
        ...

    def warn(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoguruSink:
    """Progress sink that writes through loguru, attributed to the caller"""

    def say(self, message: str) -> None:
        logger.opt(depth=1).info(message)

    def warn(self, message: str) -> None:
        logger.opt(depth=1).warning(message)

    def error(self, message: str) -> None:
        logger.opt(depth=1).error(message)
