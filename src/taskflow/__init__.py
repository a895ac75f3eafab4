"""TaskFlow: kanban boards with a pure reducer core and remote task sync."""

__version__ = "0.1.0"
