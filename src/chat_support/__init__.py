"""Live-chat support queue: admission control, shift scheduling and agent assignment."""

__version__ = "0.1.0"
