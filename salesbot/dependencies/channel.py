# Dependency to get the channel session manager
from typing import Annotated

from fastapi import Depends, Request

from salesbot.channel.session import ChannelSessionManager


def get_session_manager(request: Request) -> ChannelSessionManager:
    """Return the process-wide ChannelSessionManager."""
    return request.app.state.session_manager


SessionManagerDep = Annotated[ChannelSessionManager, Depends(get_session_manager)]
