"""
Single-pack handling for packdex.

Key Components:
    - PackLoader: Load and validate one pack directory
    - PackInstaller: Copy a pack into a consumer's directory
"""

from packdex.pack.installer import PackInstaller
from packdex.pack.loader import PackLoader

__all__ = [
    "PackInstaller",
    "PackLoader",
]
