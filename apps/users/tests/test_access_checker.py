from __future__ import annotations

import pytest

from apps.users.access import access_checker
from apps.users.capabilities import Capability, CapabilitySet
from apps.users.models import RoleAssignment, User
from shared.domain.exceptions import Forbidden, InvalidRoleSet, NotFound


@pytest.fixture
def traveller(db):
    return User.objects.create_user(email="traveller@example.com", password="pass12345")


@pytest.mark.django_db
def test_principal_without_assignments_holds_only_user(traveller):
    assert access_checker.capabilities_for(traveller.pk) == CapabilitySet.default()
    assert access_checker.has_capability(traveller.pk, Capability.USER)
    assert not access_checker.has_capability(traveller.pk, Capability.VENDOR)
    assert not access_checker.has_capability(traveller.pk, Capability.ADMIN)


@pytest.mark.django_db
def test_anonymous_principal_holds_nothing():
    assert not access_checker.has_capability(None, Capability.USER)


@pytest.mark.django_db
def test_unknown_capability_name_is_a_programming_error(traveller):
    with pytest.raises(ValueError):
        access_checker.has_capability(traveller.pk, "superhero")


@pytest.mark.django_db
def test_set_capabilities_replaces_the_whole_set(traveller):
    access_checker.set_capabilities(traveller.pk, ["user", "vendor", "admin"])
    assert access_checker.capabilities_for(traveller.pk).as_list() == ["user", "vendor", "admin"]

    access_checker.set_capabilities(traveller.pk, ["user", "vendor"])
    assert access_checker.capabilities_for(traveller.pk).as_list() == ["user", "vendor"]
    assert RoleAssignment.objects.filter(user=traveller).count() == 2


@pytest.mark.django_db
@pytest.mark.parametrize("requested", [[], ["vendor"], ["user", "pilot"]])
def test_set_capabilities_rejects_invalid_sets(traveller, requested):
    access_checker.set_capabilities(traveller.pk, ["user", "vendor"])

    with pytest.raises(InvalidRoleSet):
        access_checker.set_capabilities(traveller.pk, requested)

    assert access_checker.capabilities_for(traveller.pk).as_list() == ["user", "vendor"]


@pytest.mark.django_db
def test_set_capabilities_for_missing_user():
    with pytest.raises(NotFound):
        access_checker.set_capabilities(999_999, ["user"])


@pytest.mark.django_db
def test_grant_adds_to_existing_set(traveller):
    access_checker.set_capabilities(traveller.pk, ["user", "admin"])
    access_checker.grant(traveller.pk, Capability.VENDOR)
    assert access_checker.capabilities_for(traveller.pk).as_list() == ["user", "vendor", "admin"]


@pytest.mark.django_db
def test_grant_is_idempotent(traveller):
    access_checker.grant(traveller.pk, Capability.VENDOR)
    access_checker.grant(traveller.pk, Capability.VENDOR)
    assert RoleAssignment.objects.filter(user=traveller, capability="vendor").count() == 1


@pytest.mark.django_db
def test_require_raises_forbidden_with_capability(traveller):
    with pytest.raises(Forbidden) as excinfo:
        access_checker.require(traveller.pk, Capability.ADMIN)
    assert excinfo.value.capability == "admin"


@pytest.mark.django_db
def test_superuser_gets_admin_capability():
    admin = User.objects.create_superuser(email="root@example.com", password="pass12345")
    assert access_checker.has_capability(admin.pk, Capability.ADMIN)
    assert access_checker.has_capability(admin.pk, Capability.USER)
