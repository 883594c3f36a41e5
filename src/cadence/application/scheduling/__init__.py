# Application Scheduling Package
from .sm2 import Sm2Scheduler

__all__ = ["Sm2Scheduler"]
