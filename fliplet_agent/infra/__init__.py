"""
Infrastructure layer - Fliplet REST API access
"""

from fliplet_agent.infra.fliplet_api import FlipletAPI, truncate_entries

__all__ = ["FlipletAPI", "truncate_entries"]
