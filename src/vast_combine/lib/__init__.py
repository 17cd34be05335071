from .paths import CombinePaths, format_path
from .logging import setup_run_logging
from .command_log import append_command_log
from .compress import gzip_files
