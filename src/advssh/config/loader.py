"""Loader for advssh source files and their includes."""
import glob
import logging
import os
from typing import TYPE_CHECKING, Optional

from ..utils.paths import expand_user
from .parser import ConfigParser, ParseError, ParsedConfig

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Load source files into a Config, following `includes` globs.

    Each physical file is parsed at most once per Config. The top-level
    file must load; a file reached through an include glob that fails to
    load is logged and skipped.
    """

    def __init__(self, config: "Config", parser: Optional[ConfigParser] = None):
        self.config = config
        self.parser = parser or ConfigParser()

    def load_file(self, filename: str) -> None:
        """
        Load a source file and everything it includes.

        Raises:
            OSError: The file cannot be read
            ParseError: The file is not a valid source document
        """
        path = os.path.abspath(expand_user(filename))

        # Anti-loop protection
        if path in self.config.included_files:
            return
        self.config.included_files[path] = False

        logger.debug(f"Loading config file {path!r}")
        before = len(self.config.hosts)

        with open(path, "rb") as f:
            data = f.read()
        self.load_config(data)

        self.config.included_files[path] = True
        after = len(self.config.hosts)
        logger.debug(f"Loaded config file {path!r} ({before} + {after - before} => {after} hosts)")

        for include in list(self.config.includes):
            self.load_files(include)

    def load_files(self, pattern: str) -> None:
        """Glob `pattern` and load every match, skipping the ones that fail."""
        expanded = expand_user(pattern)
        for path in sorted(glob.glob(expanded)):
            try:
                self.load_file(path)
            except (OSError, ParseError) as e:
                logger.warning(f"Cannot include {path!r}: {e}")

    def load_config(self, data: bytes | str) -> ParsedConfig:
        """Parse a document and merge it into the Config."""
        parsed = self.parser.parse(data)
        self.merge(parsed)
        return parsed

    def merge(self, parsed: ParsedConfig) -> None:
        """Merge a parsed document; later entries replace earlier ones."""
        config = self.config
        config.hosts.update(parsed.hosts)
        config.templates.update(parsed.templates)
        if parsed.defaults is not None:
            parsed.defaults.apply_defaults(config.defaults)
            config.defaults = parsed.defaults
        for include in parsed.includes:
            if include not in config.includes:
                config.includes.append(include)
        if parsed.known_hosts_file:
            config.known_hosts_file = parsed.known_hosts_file
        if parsed.binary_path:
            config.binary_path = expand_user(parsed.binary_path)
