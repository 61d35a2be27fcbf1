"""Keep README version badges in sync and publish updates as pull requests."""

__version__ = "1.0.0"
