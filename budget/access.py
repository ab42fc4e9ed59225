from rest_framework.exceptions import PermissionDenied

from .models import BudgetShare


def resolve_budget_owner(request, write=False):
    """
    Return the user whose budget this request acts on.

    Defaults to the authenticated user. ``?owner=<id>`` switches to a budget
    shared with them; writing requires a read/write share.
    """
    owner_id = str(request.query_params.get("owner", "")).strip()
    if not owner_id or owner_id == str(request.user.pk):
        return request.user
    if not owner_id.isdigit():
        raise PermissionDenied("This budget is not shared with you.")

    share = (
        BudgetShare.objects.select_related("owner")
        .filter(owner_id=int(owner_id), shared_with=request.user)
        .first()
    )
    if share is None:
        raise PermissionDenied("This budget is not shared with you.")
    if write and not share.can_write:
        raise PermissionDenied("You have read-only access to this budget.")
    return share.owner
