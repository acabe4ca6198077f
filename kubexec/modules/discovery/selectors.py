from typing import Dict, Optional


def to_label_selector(labels: Optional[Dict[str, str]]) -> str:
    """
    Convert required label equalities into a label selector expression.

    Keys are sorted so the same labels always produce the same query.

    Example:
        >>> to_label_selector({"tier": "web", "app": "shop"})
        'app=shop,tier=web'
    """
    if not labels:
        return ""
    return ",".join(f"{key}={labels[key]}" for key in sorted(labels))


def group_match_labels(group) -> Dict[str, str]:
    """Return spec.selector.match_labels of a replica group, {} when unset."""
    spec = getattr(group, "spec", None)
    selector = getattr(spec, "selector", None)
    return dict(getattr(selector, "match_labels", None) or {})
