"""
rnpack - React Native packager lifecycle control

rnpack starts, reattaches to and stops the React Native packager for a
workspace, and resolves the environment the packager is launched with.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
