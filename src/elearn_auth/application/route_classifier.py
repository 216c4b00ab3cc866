from __future__ import annotations

from typing import Iterable, Optional, Tuple

from ..domain.constants import MatchKind
from ..domain.exceptions import ClassifierMisconfigurationError
from ..domain.value_objects import RouteRule

DEFAULT_PUBLIC_ROUTES: Tuple[RouteRule, ...] = (
    RouteRule.exact("/auth/login"),
    RouteRule.exact("/auth/signup"),
    RouteRule.exact("/auth/check-username"),
    RouteRule.exact("/auth/check-email"),
    # exact: "/courses/enrolled-courses" and friends need a principal
    RouteRule.exact("/courses"),
    RouteRule.exact("/courses/highest-enrolled-users-count"),
    RouteRule.exact("/docs"),
    RouteRule.exact("/redoc"),
    RouteRule.exact("/openapi.json"),
    RouteRule.prefix("/instructor/"),
    RouteRule.prefix("/feedback/"),
    RouteRule.prefix("/swagger-ui/"),
    RouteRule.prefix("/v3/api-docs/"),
    RouteRule.prefix("/test/"),
)


def check_rules(rules: Iterable[RouteRule]) -> Tuple[RouteRule, ...]:
    """
    Validate an ordered rule set and return it as a tuple.

    Raises:
        ClassifierMisconfigurationError when a rule is malformed, a literal is
        configured as both exact and prefix, or an exact rule can never be
        reached because an earlier prefix rule already covers its path.
    """
    checked: list[RouteRule] = []
    kinds: dict[str, MatchKind] = {}

    for rule in rules:
        if not isinstance(rule, RouteRule):
            raise ClassifierMisconfigurationError(f"Not a route rule: {rule!r}")
        if not rule.path or not rule.path.startswith("/"):
            raise ClassifierMisconfigurationError(
                f"Route rule path must start with '/': {rule.path!r}"
            )

        seen_kind = kinds.get(rule.path)
        if seen_kind is not None and seen_kind is not rule.match_kind:
            raise ClassifierMisconfigurationError(
                f"Path {rule.path!r} is configured as both exact and prefix"
            )
        if seen_kind is rule.match_kind:
            # duplicate, harmless
            continue

        if rule.match_kind is MatchKind.EXACT:
            for earlier in checked:
                if earlier.match_kind is MatchKind.PREFIX and earlier.matches(rule.path):
                    raise ClassifierMisconfigurationError(
                        f"Exact rule {rule.path!r} is shadowed by earlier prefix rule "
                        f"{earlier.path!r}"
                    )

        kinds[rule.path] = rule.match_kind
        checked.append(rule)

    return tuple(checked)


class RouteClassifier:
    """
    Decides whether a request path bypasses authentication.

    Rules are evaluated in configured order and the first match wins. Exact
    rules compare with strict equality, so a sub-resource of an exact public
    path stays private. The rule set is immutable after construction and
    safe to share between concurrent requests.
    """

    PREFLIGHT_METHOD = "OPTIONS"

    def __init__(self, rules: Optional[Iterable[RouteRule]] = None) -> None:
        self._rules = check_rules(DEFAULT_PUBLIC_ROUTES if rules is None else rules)

    @property
    def rules(self) -> Tuple[RouteRule, ...]:
        return self._rules

    def match(self, path: str) -> Optional[RouteRule]:
        """Return the first rule matching `path`, if any."""
        for rule in self._rules:
            if rule.matches(path):
                return rule
        return None

    def is_public(self, path: str, method: Optional[str] = None) -> bool:
        # CORS preflight never carries credentials
        if method is not None and method.upper() == self.PREFLIGHT_METHOD:
            return True
        return self.match(path) is not None
