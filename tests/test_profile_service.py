import pytest

from app.models.profile import Profile
from app.services import profile_service
from app.services.profile_service import EmailTaken


def test_sign_up_stores_normalised_email(data):
    profile = profile_service.sign_up(data, " Asha@Example.com ", "Trek2026x", "asha_k", "+91 9876543210")
    assert profile.email == "asha@example.com"
    assert profile.role == "user"
    assert profile.password_hash != "Trek2026x"


def test_duplicate_sign_up_is_email_taken(data):
    profile_service.sign_up(data, "asha@example.com", "Trek2026x", "asha_k", "+91 9876543210")
    with pytest.raises(EmailTaken):
        profile_service.sign_up(data, "ASHA@example.com", "Trek2026x", "asha_2", "+91 9876543210")


def test_sign_up_losing_unique_index_race_is_email_taken(data, monkeypatch):
    profile_service.sign_up(data, "asha@example.com", "Trek2026x", "asha_k", "+91 9876543210")
    real_lookup = profile_service.get_profile_by_email
    calls = []

    def lookup(data, email):
        # the pre-insert check runs before the other request has committed
        calls.append(email)
        return None if len(calls) == 1 else real_lookup(data, email)

    monkeypatch.setattr(profile_service, "get_profile_by_email", lookup)
    with pytest.raises(EmailTaken):
        profile_service.sign_up(data, "asha@example.com", "Trek2026x", "asha_2", "+91 9876543210")

    assert len(data.select(Profile)) == 1
