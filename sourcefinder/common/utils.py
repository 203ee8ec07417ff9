"""
Logging helpers shared by the resolver components
"""

import sys
import traceback


class Logger:
    """
    Simple logger class with deduplication to avoid repetitive messages

    All output goes to stderr so that resolved URLs printed on stdout stay
    machine-readable
    """

    def __init__(self, verbose=False, name=None, quiet=False):
        """
        Args:
            verbose (bool): Enable debug output
            name (str): Optional logger name, used as a message prefix
            quiet (bool): Only report errors
        """
        self.verbose = verbose
        self.name = name or "sourcefinder"
        self.seen_messages = set()  # Track already seen messages to avoid duplication
        if quiet:
            self.log_level = 3
        else:
            self.log_level = 0 if verbose else 1  # 0=debug, 1=info, 2=warning, 3=error

    def _emit(self, text):
        print(f"[{self.name}] {text}", file=sys.stderr)

    def _once(self, text):
        msg_hash = hash(text)
        if msg_hash in self.seen_messages:
            return
        self.seen_messages.add(msg_hash)
        self._emit(text)

    def debug(self, message):
        """
        Log a debug message (only in verbose mode)

        Args:
            message (str): Debug message to log
        """
        if self.log_level <= 0:
            self._once(f"... Debug: {message}")

    def info(self, message):
        """
        Log an informational message, avoiding duplicates

        Args:
            message (str): Message to log
        """
        if self.log_level <= 1:
            self._once(message)

    def warning(self, message):
        """
        Log a warning message; warnings are never deduplicated

        Args:
            message (str): Warning message to log
        """
        if self.log_level <= 2:
            self._emit(f"Warning: {message}")

    def error(self, message, exception=None):
        """
        Log an error message with optional exception details

        Args:
            message (str): Error message to log
            exception (Exception): Optional exception to include traceback for (if verbose)
        """
        if self.log_level <= 3:
            self._emit(f"Error: {message}")
            if exception and self.verbose:
                traceback.print_exception(type(exception), exception, exception.__traceback__)

