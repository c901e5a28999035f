"""cali - a simple command line calendar"""

__version__ = '0.1.0'
