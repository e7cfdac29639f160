# src/floatchat/__init__.py
"""FloatChat: simulated ARGO float dashboard"""

__version__ = "1.0.0"
