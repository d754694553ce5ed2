"""
Review Notice - deferred review prompts for plugin admin screens

This package decides, per viewing user, whether a plugin's "please leave a
review" nudge should be shown, and processes the two responses a user can
give to it ("maybe later" and "I already did").

Main modules:
- notices: notice models, gating checks, the engine and the registry
- storage: site option, user meta and capability backends
- core: configuration
- ui: HTTP API for hosts that render notices out of process
"""

__version__ = "0.1.0"
__author__ = "Review Notice Team"


__all__ = ["__version__", "__author__"]
