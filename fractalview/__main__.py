"""
Allow running the package directly: python -m fractalview
"""
import sys

from .cli import main

sys.exit(main())
