"""Route gate rules used by the page renderer"""

from typing import Optional

LOGIN_PATH = "/login"
SIGNUP_PATH = "/signup"
ONBOARDING_PATH = "/onboarding"
DASHBOARD_PATH = "/dashboard"

AUTH_PAGES = (LOGIN_PATH, SIGNUP_PATH)
APP_PREFIXES = ("/app", DASHBOARD_PATH)


def is_app_path(path: str) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in APP_PREFIXES)


def resolve_redirect(path: str, authenticated: bool, has_organization: bool) -> Optional[str]:
    """Where a page request must be sent instead, or None to render it"""
    if is_app_path(path):
        if not authenticated:
            return LOGIN_PATH
        if not has_organization:
            return ONBOARDING_PATH
        return None
    if path in AUTH_PAGES and authenticated:
        return DASHBOARD_PATH
    return None
