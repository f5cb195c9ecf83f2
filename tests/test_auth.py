"""Tests for signup, login and bearer token checks."""
from datetime import timedelta

from config import Settings
from security import create_access_token, decode_access_token

ATHLETE_SIGNUP = {
    "firstName": "Neeraj",
    "lastName": "Chopra",
    "dob": "1997-12-24",
    "role": "Athlete",
    "email": "neeraj@vismoh.io",
    "phone": "+919999999999",
    "password": "javelin90",
    "sport": "Athletics",
    "position": "Javelin",
    "experienceLevel": "Elite",
    "latitude": 29.39,
    "longitude": 76.96,
}


def test_signup_creates_profile(client, db):
    response = client.post("/auth/signup", json=ATHLETE_SIGNUP)

    assert response.status_code == 201
    auth_id = response.json()["authId"]
    profile = db["athlete"].find_one({"_id": auth_id})
    assert profile["sport"] == "Athletics"
    assert profile["isVerified"] is False
    assert "password" not in profile
    assert db["account"].find_one({"_id": "neeraj@vismoh.io"})["uid"] == auth_id


def test_signup_duplicate_email(client):
    client.post("/auth/signup", json=ATHLETE_SIGNUP)
    response = client.post("/auth/signup", json={**ATHLETE_SIGNUP, "email": "NEERAJ@vismoh.io"})
    assert response.status_code == 400
    assert response.json()["message"] == "Email already registered"


def test_signup_requires_role_fields(client):
    body = {**ATHLETE_SIGNUP, "position": None}
    response = client.post("/auth/signup", json=body)
    assert response.status_code == 400
    assert "experience level" in response.json()["message"]


def test_signup_rejects_unknown_role(client):
    response = client.post("/auth/signup", json={**ATHLETE_SIGNUP, "role": "Referee"})
    assert response.status_code == 400


def test_signup_sponsor(client, db):
    body = {
        "firstName": "Ana",
        "lastName": "Lopez",
        "role": "Sponsor",
        "email": "ana@acme.io",
        "password": "sponsor123",
        "companyName": "Acme",
        "sponsorshipType": "Equipment",
    }
    auth_id = client.post("/auth/signup", json=body).json()["authId"]
    assert db["sponsor"].find_one({"_id": auth_id})["companyName"] == "Acme"


def test_login_issues_token(client):
    auth_id = client.post("/auth/signup", json=ATHLETE_SIGNUP).json()["authId"]

    response = client.post("/auth/login", json={"email": "neeraj@vismoh.io", "password": "javelin90"})

    assert response.status_code == 200
    body = response.json()
    assert body["userData"]["role"] == "Athlete"
    assert body["userData"]["name"] == "Neeraj Chopra"
    claims = decode_access_token(body["token"], Settings)
    assert claims["id"] == auth_id
    assert claims["sport"] == "Athletics"


def test_login_wrong_password(client):
    client.post("/auth/signup", json=ATHLETE_SIGNUP)
    response = client.post("/auth/login", json={"email": "neeraj@vismoh.io", "password": "nope"})
    assert response.status_code == 401


def test_login_without_profile(client, app):
    app.state.identity.create_account("ghost@vismoh.io", "secret123")
    response = client.post("/auth/login", json={"email": "ghost@vismoh.io", "password": "secret123"})
    assert response.status_code == 403


def test_expired_token_rejected(client):
    token = create_access_token({"id": "u1"}, Settings, expires_delta=timedelta(minutes=-1))
    response = client.get("/all/getAllUsers", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_malformed_header_rejected(client, token):
    response = client.get("/all/getAllUsers", headers={"Authorization": f"Token {token}"})
    assert response.status_code == 401


def test_login_token_opens_protected_routes(client):
    client.post("/auth/signup", json=ATHLETE_SIGNUP)
    token = client.post("/auth/login", json={"email": "neeraj@vismoh.io", "password": "javelin90"}).json()["token"]

    response = client.get("/all/getAllUsers", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200


def test_token_for_deleted_account_rejected(client, app, token):
    app.state.identity.delete_account("requester@vismoh.io")

    response = client.get("/all/getAllUsers", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "User not found"}
