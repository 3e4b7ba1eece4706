from typing import Iterator


class ActiveSet:
    """
    Ids of deal requests owned by a running (or finished) driver loop.

    Claims are permanent for the lifetime of the owning agent; there is no
    release. ``claim`` never yields, so a detection pass over one snapshot
    cannot race with itself.
    """

    __slots__ = ("_claimed",)

    def __init__(self) -> None:
        self._claimed: set[str] = set()

    def claim(self, deal_request_id: str) -> bool:
        if deal_request_id in self._claimed:
            return False

        self._claimed.add(deal_request_id)
        return True

    def __contains__(self, deal_request_id: object) -> bool:
        return deal_request_id in self._claimed

    def __len__(self) -> int:
        return len(self._claimed)

    def __iter__(self) -> Iterator[str]:
        return iter(frozenset(self._claimed))
