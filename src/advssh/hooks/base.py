"""Base hook driver abstraction."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from jinja2 import Environment, StrictUndefined, Template, TemplateError

logger = logging.getLogger(__name__)

RunArgs = Mapping[str, Any]

_env = Environment(undefined=StrictUndefined, keep_trailing_newline=False)


class HookError(Exception):
    """Base class for hook failures.

    `drivers` holds every driver instantiated before the failure, so the
    caller can still release them with close_all().
    """

    def __init__(self, message: str, drivers: Optional[list["HookDriver"]] = None):
        super().__init__(message)
        self.drivers: list[HookDriver] = drivers or []


class UnknownDriverError(HookError):
    """Hook expression names a driver kind that does not exist."""
    pass


class DriverConstructError(HookError):
    """Hook driver parameters are malformed."""
    pass


class DriverRunError(HookError):
    """Hook driver failed while running."""
    pass


class HookDriver(ABC):
    """Abstract base class for hook drivers.

    A driver is built from the parameters of a hook expression
    ("<kind> <parameters>"), run with the connection context, then
    closed by the caller whatever the outcome.
    """

    kind = ""

    def __init__(self, param: str):
        self.param = param

    @abstractmethod
    def run(self, args: RunArgs) -> None:
        """Run the hook. Raises DriverRunError on failure."""
        pass

    def close(self) -> None:
        """Release resources held by the driver."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.param!r})"


class TemplatedDriver(HookDriver):
    """Driver whose parameters are a Jinja2 template.

    Templates see the run arguments as variables, for instance
    `{{ host.name }}` or `{{ event }}`.
    """

    def __init__(self, param: str):
        super().__init__(param)
        if not param.strip():
            raise DriverConstructError(f"{self.kind}: missing parameters")
        try:
            self.template: Template = _env.from_string(param)
        except TemplateError as e:
            raise DriverConstructError(f"{self.kind}: invalid template {param!r}: {e}") from e

    def render(self, args: RunArgs) -> str:
        try:
            return self.template.render(**args)
        except TemplateError as e:
            raise DriverRunError(f"{self.kind}: cannot render {self.param!r}: {e}") from e
