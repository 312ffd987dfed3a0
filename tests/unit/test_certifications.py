"""Unit tests for certification expiry status."""
from datetime import date, timedelta

import pytest

from api.services.certifications import (
    STATUS_ACTIVE,
    STATUS_EXPIRED,
    STATUS_EXPIRING_SOON,
    certification_status,
    evaluate,
)
from api.services.records import CertificationRecord

TODAY = date(2025, 10, 20)


@pytest.mark.unit
class TestCertificationStatus:
    @pytest.mark.parametrize(
        "offset,status",
        [(-1, STATUS_EXPIRED), (0, STATUS_EXPIRING_SOON), (21, STATUS_EXPIRING_SOON), (22, STATUS_ACTIVE)],
    )
    def test_boundaries(self, offset, status):
        assert certification_status(TODAY + timedelta(days=offset), TODAY) == status

    def test_evaluate_sorts_by_expiration(self):
        certs = [
            CertificationRecord(id="c1", user_id=1, certification_name="CPhT", issue_date=date(2024, 1, 1), expiration_date=date(2026, 1, 1)),
            CertificationRecord(id="c2", user_id=1, certification_name="Sterile", issue_date=date(2024, 1, 1), expiration_date=date(2025, 10, 1)),
        ]
        statuses = evaluate(certs, TODAY)
        assert [s.certification.id for s in statuses] == ["c2", "c1"]
        assert statuses[0].status == STATUS_EXPIRED
        assert statuses[0].days_until_expiration == -19
        assert statuses[1].status == STATUS_ACTIVE
