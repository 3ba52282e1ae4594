"""
Application constants for IntentRelay
"""

from . import app, attribution, redis
from .app import *
from .attribution import *
from .redis import *

__all__ = app.__all__ + attribution.__all__ + redis.__all__
