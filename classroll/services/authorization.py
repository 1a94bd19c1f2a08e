"""Role claims and the ownership predicate.

Tokens carry a single ``role`` field shaped ``"<kind>:<id>"`` (for example
``"teacher:0190f5c2-..."``). ``parse_role_claim`` decodes it once per request
into a ``RoleClaim``; ``extract_role`` answers "does this claim belong to the
owner of the resource?".
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

ROLE_KINDS = ("student", "teacher", "admin")

_UUID7 = r"[0-9a-f]{8}-[0-9a-f]{4}-7[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"
_LOOSE_ID = r"[0-9a-f-]+"
# The id must run to the end of the token, so "teacher:abcz" never yields "abc".
_ID_END = r"(?![0-9a-z-])"

# Per owner kind: strict UUIDv7 first, loose hex/dash fallback second.
_OWNER_PATTERNS = {
    "teacher": (
        re.compile(rf"teacher:({_UUID7}){_ID_END}", re.IGNORECASE),
        re.compile(rf"teacher:({_LOOSE_ID}){_ID_END}"),
    ),
    "admin": (
        re.compile(rf"admin:({_UUID7}){_ID_END}", re.IGNORECASE),
        re.compile(rf"admin:({_LOOSE_ID}){_ID_END}"),
    ),
}


def _candidate_ids(request_role: str) -> list[str]:
    ids = []
    for patterns in _OWNER_PATTERNS.values():
        for pattern in patterns:
            match = pattern.search(request_role)
            if match and match.group(1):
                ids.append(match.group(1))
    return ids


def extract_role(
    request_role: str,
    owner_id: Optional[str],
    log: Optional[logging.Logger] = None,
) -> bool:
    """Return True when the teacher/admin id embedded in ``request_role`` is ``owner_id``.

    A missing ``owner_id`` is logged as an error and treated as not
    authorized. Never raises.
    """
    try:
        if owner_id is None:
            raise ValueError("owner id is None")
        return any(candidate == owner_id for candidate in _candidate_ids(request_role))
    except Exception as e:
        if log is not None:
            log.error(f"Error in the permission check: {e}")
        return False


@dataclass(frozen=True)
class RoleClaim:
    kind: str
    subject_id: str

    @property
    def raw(self) -> str:
        return f"{self.kind}:{self.subject_id}"

    @property
    def is_admin(self) -> bool:
        return self.kind == "admin"

    @property
    def is_teacher(self) -> bool:
        return self.kind == "teacher"

    def owns(self, owner_id: Optional[str], log: Optional[logging.Logger] = None) -> bool:
        return extract_role(self.raw, owner_id, log)

    def can_manage(self, owner_id: Optional[str], log: Optional[logging.Logger] = None) -> bool:
        """Admins manage everything; teachers only what they own."""
        return self.is_admin or self.owns(owner_id, log)


def parse_role_claim(claim: Optional[str]) -> Optional[RoleClaim]:
    """Decode ``"<kind>:<id>"``; None for anything else."""
    if not claim or ":" not in claim:
        return None
    kind, _, subject_id = claim.partition(":")
    kind = kind.strip().lower()
    subject_id = subject_id.strip()
    if kind not in ROLE_KINDS or not subject_id:
        return None
    return RoleClaim(kind=kind, subject_id=subject_id)
