"""
crossshell - declarative cross-compilation development shells.

Describe a target triple, the host tools and the target libraries of a
shell in crossshell.yaml; crossshell composes the environment and hands it
to Nix.
"""

__version__ = "0.1.0"
