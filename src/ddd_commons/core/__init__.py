"""Core module for ddd-commons.

Clean Core - Only exports exceptions.
"""

from .exceptions import *
from .exceptions import __all__
