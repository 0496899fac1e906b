from django.contrib.auth import get_user_model
from django.db.models import Q

ADMIN_ROLE_CODES = ["admin"]
EDITOR_ROLE_CODES = ["admin", "editor"]


def user_has_role(user, role_codes):
    if user is None or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return user.role in role_codes


def pulpit_members(query="", include_all=False, role=None):
    qs = get_user_model().objects.filter(is_active=True).order_by("full_name")
    if not include_all:
        qs = qs.filter(pulpit_eligible=True)
    if role:
        qs = qs.filter(role=role)
    if query:
        qs = qs.filter(Q(full_name__icontains=query) | Q(email__icontains=query))
    return qs
