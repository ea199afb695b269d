"""Campus Coffee POS service"""

__version__ = "1.0.0"
