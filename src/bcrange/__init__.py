"""bcrange - object id range and conflict analysis for AL workspaces."""

__version__ = "0.1.0"
