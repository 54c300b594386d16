"""
Agent workflows module.
Contains the Fliplet assistant's tool-calling loop.
"""

from fliplet_agent.agents.assistant import AssistantAgent, create_agent

__all__ = ["AssistantAgent", "create_agent"]
