"""Abstract interface to the host runtime."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class HostClient(ABC):
    """
    The two host calls the queue depends on.

    Implement this to plug the queue into a concrete runtime: one call to
    submit a prompt to a session, one to show a toast in the host UI.
    """

    @abstractmethod
    async def send_prompt(
        self,
        session_id: str,
        *,
        agent: Optional[str] = None,
        model: Optional[Dict[str, str]] = None,
        system: Optional[str] = None,
        tools: Optional[Dict[str, bool]] = None,
        parts: List[Dict[str, Any]],
    ) -> Any:
        """
        Submit a prompt to a session.

        Args:
            session_id: Target session
            agent: Optional agent selector
            model: Optional {"providerID", "modelID"} pair
            system: Optional system prompt override
            tools: Optional per-tool enable/disable map
            parts: Serialized message parts

        Raises:
            Any exception the host raises; the queue treats it as a failed send.
        """
        pass

    @abstractmethod
    async def show_toast(
        self,
        *,
        title: str,
        message: str,
        variant: str,
        duration: float,
    ) -> None:
        """
        Show a toast in the host UI.

        Best-effort: callers swallow failures because the UI may not be
        attached (API-only usage).
        """
        pass
