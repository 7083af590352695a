from .base import Base
from .house import House
from .vote import Vote

__all__ = ['Base', 'House', 'Vote']
