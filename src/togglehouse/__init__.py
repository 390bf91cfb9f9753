"""
togglehouse – feature-toggle management server.

Import path convention::

    from togglehouse.kernel.errors import ConflictError
    from togglehouse.application.toggles import FeatureToggle, Tag
    from togglehouse.adapters.fastapi import create_app
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
