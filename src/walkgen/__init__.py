"""walkgen: compile declarative runbooks into interactive console walkthroughs."""

__version__ = "0.1.0"
