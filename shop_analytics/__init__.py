"""CloudBurst shop dashboard: JSON record store, analytics and recommendations."""

__version__ = '1.0.0'
