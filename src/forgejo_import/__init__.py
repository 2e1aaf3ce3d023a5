"""forgejo-import

Mirror GitHub users, organisations and repositories to a Forgejo instance,
creating what is missing and skipping what already exists.
"""

__version__ = '0.1.0'

from .cli import main

__all__ = ['main']
