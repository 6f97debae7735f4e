"""Configuration module for Agent Passage.

Available Configurations:
- PassageConfig: server policy override and logging settings
"""

from agent_passage.config.passage_config import (
    DEVELOPMENT_PASSAGE_CONFIG,
    PassageConfig,
)

__all__ = ["DEVELOPMENT_PASSAGE_CONFIG", "PassageConfig"]
