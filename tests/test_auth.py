"""
Unit tests for sign-in.

Tests:
- Successful sign-in and token contents
- Token lifetime
- Wrong password / unknown user / missing fields
"""

from jose import jwt

from ledger_api.core.config import settings


class TestSignIn:
    """Test the sign-in endpoint"""

    def test_signin_success(self, client, create_user):
        """Valid credentials return a token carrying the username"""
        create_user(username="alice", password="pw")

        response = client.post("/api/signin", json={"username": "alice", "password": "pw"})

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "alice"
        payload = jwt.decode(data["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["username"] == "alice"

    def test_token_valid_for_thirty_days(self, client, create_user):
        """Token expiry is exactly 30 days after issuance"""
        create_user(username="alice", password="pw")

        response = client.post("/api/signin", json={"username": "alice", "password": "pw"})
        payload = jwt.decode(
            response.json()["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )

        assert payload["exp"] - payload["iat"] == 30 * 24 * 60 * 60

    def test_signin_wrong_password(self, client, create_user):
        """Wrong password is rejected without a token"""
        create_user(username="alice", password="pw")

        response = client.post("/api/signin", json={"username": "alice", "password": "wrong"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    def test_signin_unknown_user(self, client):
        """Unknown username is rejected the same way as a wrong password"""
        response = client.post("/api/signin", json={"username": "nobody", "password": "pw"})

        assert response.status_code == 401
        assert "token" not in response.json()

    def test_signin_missing_fields(self, client):
        response = client.post("/api/signin", json={"username": "alice"})

        assert response.status_code == 400
        assert response.json()["error"] == "Username and password are required"

    def test_create_then_signin_flow(self, client):
        """Account created through the API can sign in with its password only"""
        created = client.post("/api/create-user", json={"username": "alice", "password": "pw"})
        assert created.status_code == 201

        ok = client.post("/api/signin", json={"username": "alice", "password": "pw"})
        assert ok.status_code == 200
        assert "token" in ok.json()

        rejected = client.post("/api/signin", json={"username": "alice", "password": "wrong"})
        assert rejected.status_code == 401
