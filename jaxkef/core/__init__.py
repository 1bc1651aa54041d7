from .config import enable_x64, x64_enabled
from .exceptions import NotFittedError
from .log import Log, logger
