from .._version import __version__


def user_agent_value(component: str = "") -> str:
    """User-Agent header value, optionally tagged with the calling component."""
    if component:
        return f"restline/{__version__} ({component})"
    return f"restline/{__version__}"
