"""User ID whitelist/blacklist strategy."""

from typing import Any

from .interfaces import FlagStrategy, Strategy


class UserIdStrategy(Strategy):
    """
    Enable for specific users.

    Usage:
        {"strategy": "user_id", "whitelist": ["42", "1337"]}
        {"strategy": "user_id", "blacklist": ["666"]}

    Logic:
    1. No user_id in context -> disabled
    2. Non-empty whitelist -> enabled only for listed users (blacklist ignored)
    3. Non-empty blacklist -> enabled for everyone not listed
    4. Neither configured -> enabled

    IDs compare as strings, so 42 and "42" are the same user.
    """

    name = FlagStrategy.USER_ID.value

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        context = context or {}
        user_id = context.get("user_id")
        if user_id is None:
            return False

        whitelist = config.get("whitelist")
        if whitelist:
            return str(user_id) in _id_set(whitelist)

        blacklist = config.get("blacklist")
        if blacklist:
            return str(user_id) not in _id_set(blacklist)

        return True


def _id_set(ids: Any) -> set[str]:
    if isinstance(ids, (str, bytes)) or not hasattr(ids, "__iter__"):
        ids = [ids]
    return {str(item) for item in ids}
