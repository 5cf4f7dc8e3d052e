"""
Pydantic schemas for UltraCare Backend.

Contains all API request/response schemas organized by module.
"""

from .common import *
from .auth import *
from .subscription import *
from .device import *
from .resident import *
from .alert import *
from .push import *
from .admin import *
