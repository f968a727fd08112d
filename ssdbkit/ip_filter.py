"""Allow/deny filtering of IPv4 addresses by prefix."""

from __future__ import annotations

from sortedcontainers import SortedSet as _SortedStrings

_ALL = ("all", "*")


def _is_full_ip(ip_prefix: str) -> bool:
    return ip_prefix.count(".") == 3


def _entry(ip_prefix: str) -> str:
    # '=' and '@' sort after every character an address can hold.
    return ip_prefix + ("=" if _is_full_ip(ip_prefix) else "@")


def _check_hit(entries: _SortedStrings, ip: str) -> bool:
    index = entries.bisect_right(ip)
    if index >= len(entries):
        return False
    prefix = entries[index]
    length = len(prefix) - 1
    if prefix[length] == "=":
        return prefix[:length] == ip
    if len(ip) >= length:
        return ip[:length] == prefix[:length]
    return False


class IpFilter:
    """Decides whether an address may pass; specific rules beat the all-rules."""

    def __init__(self) -> None:
        self.allow_all = True
        self.deny_all = False
        self.allow: _SortedStrings = _SortedStrings()
        self.deny: _SortedStrings = _SortedStrings()

    def add_allow(self, ip_prefix: str) -> None:
        """Allow a prefix ("all" or "*" allows everything)."""
        if ip_prefix in _ALL:
            self.allow_all = True
        else:
            self.allow_all = False
            self.allow.add(_entry(ip_prefix))

    def del_allow(self, ip_prefix: str) -> None:
        if ip_prefix in _ALL:
            self.allow_all = False
        else:
            self.allow.discard(_entry(ip_prefix))

    def add_deny(self, ip_prefix: str) -> None:
        """Deny a prefix ("all" or "*" denies everything not explicitly allowed)."""
        if ip_prefix in _ALL:
            self.deny_all = True
        else:
            self.deny.add(_entry(ip_prefix))

    def del_deny(self, ip_prefix: str) -> None:
        if ip_prefix in _ALL:
            self.deny_all = False
        else:
            self.deny.discard(_entry(ip_prefix))

    def check_pass(self, ip: str) -> bool:
        """True if the address may pass."""
        if _check_hit(self.deny, ip):
            return False
        if _check_hit(self.allow, ip):
            return True
        if self.deny_all:
            return False
        return self.allow_all