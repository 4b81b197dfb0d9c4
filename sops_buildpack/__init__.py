"""
Heroku buildpack that installs the sops secrets tool.

The compile pipeline reads SOPS_VERSION from the build's config vars,
fetches or reuses the matching binary and puts it on the runtime PATH.
"""

__version__ = "0.1.0"
