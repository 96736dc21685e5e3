"""Tests for request validation rules and upload helpers."""

import pytest
from pydantic import ValidationError

from app.schemas.schemas import (
    BookingCreate, EventCreate, ProfileUpdate, RegisterRequest, is_valid_profile_link
)
from app.utils.file_upload import (
    avatar_key, certificate_key, get_file_extension, project_image_key, safe_filename
)


class TestProfileLinks:
    @pytest.mark.parametrize("url,platform", [
        ("https://github.com/jane-doe", "github"),
        ("https://www.linkedin.com/in/jane-doe/", "linkedin"),
        ("https://leetcode.com/janedoe", "leetcode"),
        ("https://auth.geeksforgeeks.org/user/janedoe", "gfg"),
        ("https://github.com/jane/repo", "github"),  # not the pattern, but names the platform
    ])
    def test_accepted(self, url, platform):
        assert is_valid_profile_link(url, platform)

    def test_rejected(self):
        assert not is_valid_profile_link("https://example.com/jane", "linkedin")

    def test_profile_update_reports_platform(self):
        with pytest.raises(ValidationError) as exc:
            ProfileUpdate(github_url="https://example.com/jane")
        assert "valid GitHub URL" in str(exc.value)

    def test_bio_limit(self):
        ProfileUpdate(bio="x" * 500)
        with pytest.raises(ValidationError):
            ProfileUpdate(bio="x" * 501)

    def test_blank_full_name(self):
        with pytest.raises(ValidationError):
            ProfileUpdate(full_name="   ")


class TestBookingAgenda:
    def test_199_characters_rejected(self):
        with pytest.raises(ValidationError) as exc:
            BookingCreate(day="monday", time="10:00", agenda="a" * 199)
        assert "Current: 199/200" in str(exc.value)

    def test_200_characters_accepted(self):
        assert len(BookingCreate(day="monday", time="10:00", agenda="a" * 200).agenda) == 200

    def test_time_format(self):
        with pytest.raises(ValidationError):
            BookingCreate(day="monday", time="10am", agenda="a" * 200)


class TestOtherRequests:
    def test_register_needs_email_or_phone(self):
        with pytest.raises(ValidationError):
            RegisterRequest(password="longenough", full_name="No Contact", role="student")
        assert RegisterRequest(phone="+919876543210", password="longenough", full_name="Phone Only", role="student")

    def test_event_end_before_start(self):
        with pytest.raises(ValidationError):
            EventCreate(title="Exam", start_date="2026-03-10T10:00:00", end_date="2026-03-09T10:00:00")


class TestUploadKeys:
    def test_extension(self):
        assert get_file_extension("Photo.PNG") == ".png"
        assert get_file_extension("noext") == ""

    def test_safe_filename(self):
        assert safe_filename("../../etc/my shot.png") == "my-shot.png"

    def test_key_prefixes(self):
        assert project_image_key(3, 9, "a.png").startswith("3/9/")
        assert certificate_key(3, "c.jpg").startswith("3/certificates/")
        key = avatar_key(3, ".webp")
        assert key.startswith("3/avatar-") and key.endswith(".webp")
