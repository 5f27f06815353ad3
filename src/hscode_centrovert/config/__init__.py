"""Configuration module."""
from .settings import Config
from .region_policies import REGION_POLICIES, get_region_policy

__all__ = ['Config', 'REGION_POLICIES', 'get_region_policy']
