import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSSSSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[rel_path]}</cyan>:<cyan>{line}</cyan> - <level>{extra[formatted_prefix]}{message}</level>"
)


def add_log_context(record) -> bool:
    """Loguru filter: source path relative to the working dir, plus a [region] tag when bound"""
    source = Path(record["file"].path)
    cwd = Path.cwd()
    if source.is_relative_to(cwd):
        source = source.relative_to(cwd)
    record["extra"]["rel_path"] = str(source)

    region = record["extra"].get("region")
    record["extra"]["formatted_prefix"] = f"[{region}] " if region else ""
    return True


def configure_logger(verbose: bool = False):
    logger.remove()
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level="DEBUG" if verbose else "INFO",
        colorize=True,
        filter=add_log_context,
    )
