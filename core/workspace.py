from fastapi import Request

from src.trace_bc.query.workspace import TraceWorkspace


def get_workspace(request: Request) -> TraceWorkspace:
    """Dependency that provides the application's TraceWorkspace."""
    return request.app.state.workspace
