"""GitHub Organization Mirror

Mirrors every Git repository of GitHub Enterprise Cloud source organizations
into paired destination organizations using git mirror clones and pushes.
"""

__version__ = '0.1.0'

from .cli.main import main

__all__ = ['main']
