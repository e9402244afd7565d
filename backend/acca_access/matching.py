"""
Resource and action matching for role permission rows.

Matching rules:
- possessed "*" matches any resource / any action
- possessed "manage" action implies every other action
- possessed resource "ketidakhadiran" covers "ketidakhadiran:izin"
  and "ketidakhadiran.izin"

Comparisons are case-sensitive.
"""

WILDCARD = "*"
MANAGE_ACTION = "manage"
RESOURCE_SCOPE_SEPARATORS = (":", ".")


def match_resource(required: str, possessed: str) -> bool:
    if possessed == WILDCARD:
        return True
    if possessed == required:
        return True
    return any(required.startswith(possessed + sep) for sep in RESOURCE_SCOPE_SEPARATORS)


def match_action(required: str, possessed: str) -> bool:
    if possessed in (WILDCARD, MANAGE_ACTION):
        return True
    return possessed == required
