from .clock import Stopwatch
from .logging import ThrottledLogger
from .types import TIMEOUT, TimeoutToken
