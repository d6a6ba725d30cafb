"""Path helpers."""
import os


def expand_user(path: str) -> str:
    """Resolve '~' and '$HOME' (and other env vars) in a path.

    Examples:
        "~/.ssh/assh.yml" -> "/home/me/.ssh/assh.yml"
        "$HOME/.ssh/config" -> "/home/me/.ssh/config"
    """
    if not path:
        return path
    return os.path.expandvars(os.path.expanduser(path))
