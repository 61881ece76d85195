from fastapi import Request

from httptoolkit.core.config import Settings
from httptoolkit.tools import Tools


def get_tools(request: Request) -> Tools:
    return request.app.state.tools


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
