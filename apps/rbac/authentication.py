# apps/rbac/authentication.py
from django.contrib.auth.models import AnonymousUser
from rest_framework.authentication import SessionAuthentication

from apps.accounts.session import get_session_context


class CollaboratorSessionAuthentication(SessionAuthentication):
    """
    I authenticate API calls from the handed-over collaborator session.
    There are no local users: request.user stays anonymous and request.auth
    carries the SessionContext. Unsafe methods still need the CSRF token.
    """

    def authenticate(self, request):
        ctx = get_session_context(request._request)
        if ctx is None:
            return None
        self.enforce_csrf(request)
        return (AnonymousUser(), ctx)
