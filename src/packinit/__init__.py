"""
packinit - guided webpack configuration builder

packinit asks a short series of questions and turns the answers into a
webpack configuration document, a generated ``webpack.<name>.js`` file and
the list of npm dev-dependencies that configuration needs.
"""

__version__ = "0.4.0"
__all__ = ["__version__"]
