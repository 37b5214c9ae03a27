"""create-rext -- bootstraps a new rext project from the bundled template."""

__version__ = "0.1.0"
