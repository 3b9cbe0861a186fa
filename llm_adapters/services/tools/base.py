"""Base tool contract for agent-callable tools."""

from abc import ABC, abstractmethod
from typing import Any


class BaseTool(ABC):
    """
    Abstract tool. An agent picks a tool by name/description and calls run with either a
    bare string or a mapping carrying an "input" field.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...

    @abstractmethod
    async def run(self, input: Any) -> str:
        """Execute the tool and return text for the agent."""
        ...
