"""Tests for profile verification."""
import pytest

from errors import ValidationError
from verification import mask_aadhaar, validate_aadhaar

VALID_AADHAAR = "234123412346"


def test_validate_aadhaar_accepts_checksum():
    assert validate_aadhaar("2341 2341 2346") == VALID_AADHAAR


@pytest.mark.parametrize("number", [None, "", "234123412347", "12345", "abcdabcdabcd"])
def test_validate_aadhaar_rejects(number):
    with pytest.raises(ValidationError):
        validate_aadhaar(number)


def test_mask_aadhaar():
    assert mask_aadhaar(VALID_AADHAAR) == "XXXX-XXXX-2346"


def test_verify_athlete_with_certificate(client, auth_headers, db, ai, media, seed):
    seed("Athlete", "a1")
    ai.queue('```json\n{"isLegitimate": true, "confidenceScore": 88, "reasoning": "ok", "summary": "Looks genuine"}\n```')

    response = client.post(
        "/verify/athlete/a1",
        data={"aadharNumber": VALID_AADHAAR},
        files=[("certificates", ("medal.png", b"\x89PNG fake", "image/png"))],
        headers=auth_headers,
    )

    assert response.status_code == 200
    verification = response.json()["verification"]
    assert verification["aadharLastFour"] == "2346"
    assert verification["certificatesCount"] == 1
    assert media.uploads[0]["folder"] == "certificates"
    assert media.uploads[0]["resource_type"] == "image"

    stored = db["verification"].find_one({"_id": "a1"})
    assert stored["idVerification"]["aadharNumber"] == "XXXX-XXXX-2346"
    assert stored["idVerification"]["certificatesVerification"][0]["aiVerification"]["confidenceScore"] == 88
    assert db["athlete"].find_one({"_id": "a1"})["isVerified"] is True


def test_unparseable_certificate_assessment_falls_back(client, auth_headers, db, ai, seed):
    seed("Coach", "c1")
    ai.queue("This certificate seems fine to me.")

    response = client.post(
        "/verify/coach/c1",
        data={"aadharNumber": VALID_AADHAAR, "experienceYears": "12", "licenseNumber": "LIC-9"},
        files=[("certificates", ("license.pdf", b"%PDF-1.4", "application/pdf"))],
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["verification"]["experienceYears"] == 12
    stored = db["verification"].find_one({"_id": "c1"})
    assessment = stored["idVerification"]["certificatesVerification"][0]["aiVerification"]
    assert assessment["isLegitimate"] is None
    assert assessment["reasoning"] == "Failed to parse AI response"


def test_verify_invalid_aadhaar(client, auth_headers, db, media, seed):
    seed("Athlete", "a1")
    response = client.post("/verify/athlete/a1", data={"aadharNumber": "111"}, headers=auth_headers)

    assert response.status_code == 400
    assert media.uploads == []
    assert db["athlete"].find_one({"_id": "a1"})["isVerified"] is False


def test_verify_unknown_profile(client, auth_headers):
    response = client.post("/verify/coach/ghost", data={"aadharNumber": VALID_AADHAAR}, headers=auth_headers)
    assert response.status_code == 404


def test_verify_sponsor(client, auth_headers, db, seed):
    seed("Sponsor", "s1")
    response = client.post(
        "/verify/sponsor/s1",
        data={"aadharNumber": VALID_AADHAAR, "companyRegistrationNumber": "U12345"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["verification"]["companyRegistrationNumber"] == "U12345"
    assert db["sponsor"].find_one({"_id": "s1"})["isVerified"] is True


def test_verify_rejects_unsupported_file(client, auth_headers, seed):
    seed("Athlete", "a1")
    response = client.post(
        "/verify/athlete/a1",
        data={"aadharNumber": VALID_AADHAAR},
        files=[("certificates", ("notes.txt", b"hello", "text/plain"))],
        headers=auth_headers,
    )
    assert response.status_code == 400
