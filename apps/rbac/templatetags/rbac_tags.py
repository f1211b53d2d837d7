# apps/rbac/templatetags/rbac_tags.py
from django import template

from apps.rbac.permissions import has_any_permission

register = template.Library()


@register.filter
def has_perm(permissions, names_csv: str) -> bool:
    """
    Usage: {% if console_session.permissions|has_perm:"view_patient" %} ... {% endif %}
    Any listed name passes; all_permission always passes.
    """
    want = [n.strip() for n in (names_csv or "").split(",") if n.strip()]
    if not want:
        return False
    return has_any_permission(permissions or (), *want)
