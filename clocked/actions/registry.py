import logging
from typing import Dict, List, Optional

from clocked.actions.base import Action

logger = logging.getLogger(__name__)


class ActionRegistry:
    """Maps action type keys to action instances."""

    def __init__(self) -> None:
        self._actions: Dict[str, Action] = {}

    def register(self, action: Action) -> None:
        if action.type in self._actions:
            logger.warning(f"Action type '{action.type}' re-registered, replacing previous")
        self._actions[action.type] = action
        logger.debug(f"Registered action '{action.type}'")

    def get(self, action_type: str) -> Optional[Action]:
        return self._actions.get(action_type)

    def get_all(self) -> List[Action]:
        return list(self._actions.values())

    def has(self, action_type: str) -> bool:
        return action_type in self._actions

    def describe(self) -> List[Dict[str, str]]:
        """``{type, name, icon}`` rows in registration order."""
        return [action.describe() for action in self._actions.values()]

    def __contains__(self, action_type: object) -> bool:
        return action_type in self._actions

    def __len__(self) -> int:
        return len(self._actions)
