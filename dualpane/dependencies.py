from fastapi import Request

from dualpane.services.workspace import Workspace


def get_workspace(request: Request) -> Workspace:
    """Workspace owned by the running application"""
    return request.app.state.workspace
