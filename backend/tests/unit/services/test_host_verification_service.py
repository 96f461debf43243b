# backend/tests/unit/services/test_host_verification_service.py
import pytest

from dialoom.core.enums import HostVerificationStatus
from dialoom.core.exceptions import (
    BusinessRuleException,
    ForbiddenException,
    NotFoundException,
)
from dialoom.services.host_verification_service import (
    HostVerificationService,
    require_host_account,
)


@pytest.fixture
def verification_service(db):
    return HostVerificationService(db)


def test_apply_moves_user_to_registered(verification_service, guest):
    user = verification_service.apply_as_host(guest)

    assert user.host_verification_status == HostVerificationStatus.REGISTERED.value


def test_apply_again_after_rejection(verification_service, make_user):
    user = make_user(host_status=HostVerificationStatus.REJECTED)
    user.verification_rejection_reason = "Incomplete profile"

    verification_service.apply_as_host(user)

    assert user.host_verification_status == HostVerificationStatus.REGISTERED.value
    assert user.verification_rejection_reason is None


def test_verified_host_cannot_reapply(verification_service, verified_host):
    with pytest.raises(BusinessRuleException):
        verification_service.apply_as_host(verified_host)


def test_admin_approves_registered_host(verification_service, make_user, admin_user):
    applicant = make_user(host_status=HostVerificationStatus.REGISTERED)

    user = verification_service.approve(applicant.id, admin_user)

    assert user.is_verified_host
    assert user.verified_by_id == admin_user.id
    assert user.verified_at is not None


def test_approve_is_idempotent(verification_service, verified_host, admin_user):
    user = verification_service.approve(verified_host.id, admin_user)

    assert user.is_verified_host
    assert user.verified_by_id is None


def test_admin_rejects_with_reason(verification_service, make_user, admin_user):
    applicant = make_user(host_status=HostVerificationStatus.REGISTERED)

    user = verification_service.reject(applicant.id, admin_user, "Missing credentials")

    assert user.host_verification_status == HostVerificationStatus.REJECTED.value
    assert user.verification_rejection_reason == "Missing credentials"


def test_non_admin_cannot_review(verification_service, make_user, guest):
    applicant = make_user(host_status=HostVerificationStatus.REGISTERED)

    with pytest.raises(ForbiddenException):
        verification_service.approve(applicant.id, guest)
    with pytest.raises(ForbiddenException):
        verification_service.list_pending(guest)


def test_unknown_user(verification_service, admin_user):
    with pytest.raises(NotFoundException):
        verification_service.approve("01HZZZZZZZZZZZZZZZZZZZZZZZ", admin_user)


def test_list_pending_only_returns_registered(verification_service, make_user, admin_user):
    pending = make_user(host_status=HostVerificationStatus.REGISTERED)
    make_user(host_status=HostVerificationStatus.REJECTED)
    make_user(host_status=HostVerificationStatus.VERIFIED)

    assert [user.id for user in verification_service.list_pending(admin_user)] == [pending.id]


@pytest.mark.parametrize(
    "status,allowed",
    [
        (HostVerificationStatus.UNREGISTERED, False),
        (HostVerificationStatus.REJECTED, False),
        (HostVerificationStatus.REGISTERED, True),
        (HostVerificationStatus.VERIFIED, True),
    ],
)
def test_require_host_account(make_user, status, allowed):
    user = make_user(host_status=status)

    if allowed:
        require_host_account(user)
    else:
        with pytest.raises(ForbiddenException):
            require_host_account(user)
