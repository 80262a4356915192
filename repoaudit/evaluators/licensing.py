"""Licensing evaluator."""

from __future__ import annotations

from datetime import datetime

from ..models import CategoryScore, RepositorySnapshot
from .base import Evaluator, Tally
from .signals import contains_any

LICENSE_POINTS = 4.0
OSI_POINTS = 3.0
NON_STANDARD_POINTS = 1.0
ROOT_FILE_POINTS = 1.0
BUSINESS_FRIENDLY_POINTS = 1.0

OSI_APPROVED = frozenset(
    {
        "MIT",
        "Apache-2.0",
        "GPL-3.0",
        "GPL-2.0",
        "BSD-2-Clause",
        "BSD-3-Clause",
        "ISC",
        "MPL-2.0",
        "Unlicense",
        "0BSD",
    }
)
BUSINESS_FRIENDLY = frozenset({"MIT", "Apache-2.0"})

NO_LICENSE_DETAIL = "NO LICENSE FILE"


class LicensingEvaluator(Evaluator):
    key = "licensing"

    def evaluate(self, snapshot: RepositorySnapshot, now: datetime) -> CategoryScore:
        tally = Tally()
        license_info = snapshot.license
        spdx_id = license_info.spdx_id if license_info else None

        if license_info is not None:
            tally.award(LICENSE_POINTS, f"License: {license_info.label}")
            if spdx_id in OSI_APPROVED:
                tally.award(OSI_POINTS, "OSI-approved")
            else:
                tally.award(NON_STANDARD_POINTS, "Non-standard")
        else:
            tally.note(NO_LICENSE_DETAIL)

        # A LICENSE file at the root counts even when the provider could not classify it.
        if contains_any(snapshot.root_entries, ("license",)):
            tally.award(ROOT_FILE_POINTS)

        if spdx_id in BUSINESS_FRIENDLY:
            tally.award(BUSINESS_FRIENDLY_POINTS, "Business-friendly")

        return tally.result()
