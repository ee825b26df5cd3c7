"""Mobile platform controllers."""
from .general import GeneralMobilePlatform, TargetType

__all__ = ["GeneralMobilePlatform", "TargetType"]
