"""Alpine + Nix root filesystem builder for LXC images.

Core design goals:
- Verify every downloaded byte before it is used
- Fail fast with step-specific context
- Never leave kernel filesystems mounted after a run
- Centralized logging
"""

__all__ = []
