import logging
import warnings
from pathlib import Path


CONSOLE_FORMAT = "[vast combine]: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_run_logging(log_path: Path | None, mode: str = "a", verbose: bool = True) -> None:
    """Configure logging for a combine run.

    Messages always go to stderr (INFO and up when ``verbose``, otherwise only
    warnings and errors). When ``log_path`` is given every INFO message is also
    appended to that file so repeated runs accumulate one history.
    """
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO if verbose else logging.WARNING)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if log_path is not None:
        file_handler = logging.FileHandler(log_path, mode=mode)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=logging.INFO, handlers=handlers)

    # Route Python warnings (warnings.warn) into the logging system so they
    # land in the run log instead of going straight to stderr.
    logging.captureWarnings(True)
    warnings.filterwarnings("default")
