"""templatekit: fetch-or-deploy provisioning of application templates."""

__version__ = "0.1.0"
