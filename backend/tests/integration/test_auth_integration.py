"""
Integration tests for authentication flow.

Tests the complete authentication workflow:
1. Registration of individual and business accounts
2. Login with valid and invalid credentials
3. Protected route access with bearer tokens and API keys
4. API key rotation and deactivated accounts
"""


class TestRegistration:
    """Tests for account registration."""

    def test_register_individual(self, client):
        """Test successful registration returns a token and the user."""
        response = client.post(
            "/api/auth/register",
            json={"name": "Ada", "email": "Ada@Example.com", "password": "secret123"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["token"]
        user = body["data"]
        assert user["email"] == "ada@example.com"
        assert user["userType"] == "individual"
        assert user["role"] == "user"
        assert user["plan"] == "free"
        assert user["isActive"] is True
        assert "password" not in user
        assert "passwordHash" not in user

    def test_register_business_becomes_owner(self, client):
        response = client.post(
            "/api/auth/register",
            json={
                "name": "Grace",
                "email": "grace@example.com",
                "password": "secret123",
                "userType": "business",
                "businessName": "Hopper Inc",
                "businessSize": "11-50",
            },
        )

        assert response.status_code == 201
        user = response.json()["data"]
        assert user["role"] == "owner"
        assert user["businessName"] == "Hopper Inc"
        assert user["businessSize"] == "11-50"

    def test_register_business_requires_business_name(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Grace", "email": "g@example.com", "password": "secret123", "userType": "business"},
        )

        assert response.status_code == 400
        assert "business name" in response.json()["error"].lower()

    def test_register_duplicate_email(self, client):
        """Test registration with duplicate email (case-insensitive)."""
        payload = {"name": "Ada", "email": "dup@example.com", "password": "secret123"}
        assert client.post("/api/auth/register", json=payload).status_code == 201

        payload["email"] = "DUP@example.com"
        response = client.post("/api/auth/register", json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Email already registered"}

    def test_register_short_password(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Ada", "email": "short@example.com", "password": "12345"},
        )

        assert response.status_code == 400
        assert "at least 6" in response.json()["error"]

    def test_register_invalid_email(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Ada", "email": "not-an-email", "password": "secret123"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False


class TestLogin:
    """Tests for login."""

    def test_login_success(self, client, register):
        register(email="login@example.com", password="secret123")

        response = client.post(
            "/api/auth/login",
            json={"email": "login@example.com", "password": "secret123"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["token"]
        assert body["data"]["email"] == "login@example.com"
        assert body["data"]["lastActiveAt"] is not None

    def test_login_wrong_password(self, client, register):
        register(email="wrong@example.com", password="secret123")

        response = client.post(
            "/api/auth/login",
            json={"email": "wrong@example.com", "password": "nope-nope"},
        )

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid credentials"}

    def test_login_unknown_user(self, client):
        response = client.post(
            "/api/auth/login",
            json={"email": "ghost@example.com", "password": "secret123"},
        )

        assert response.status_code == 401


class TestProtectedRoutes:
    """Tests for bearer-token access."""

    def test_me_with_token(self, client, register):
        headers, user = register(name="Linus")

        response = client.get("/api/auth/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["data"]["id"] == user["id"]

    def test_me_without_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Not authorized to access this route"}

    def test_me_with_garbage_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401

    def test_logout(self, client, register):
        headers, _ = register()

        response = client.post("/api/auth/logout", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {}}

    def test_request_id_is_echoed(self, client):
        response = client.get("/api/auth/me", headers={"x-request-id": "req-123"})

        assert response.headers["x-request-id"] == "req-123"

    def test_deactivated_account_is_rejected(self, client, register):
        headers, _ = register(email="gone@example.com")
        assert client.delete("/api/users", headers=headers).status_code == 200

        assert client.get("/api/auth/me", headers=headers).status_code == 401
        login = client.post("/api/auth/login", json={"email": "gone@example.com", "password": "secret123"})
        assert login.status_code == 401


class TestApiKeys:
    """Tests for API key issuance and use."""

    def test_free_individual_cannot_get_api_key(self, client, register):
        headers, _ = register()

        response = client.post("/api/auth/api-key", headers=headers)

        assert response.status_code == 403

    def test_paid_individual_can_get_api_key(self, client, register):
        headers, _ = register()
        client.post("/api/payments/subscribe", headers=headers, json={"plan": "basic"})

        response = client.post("/api/auth/api-key", headers=headers)

        assert response.status_code == 200
        assert response.json()["data"]["apiKey"]

    def test_api_key_authenticates_and_records_usage(self, client, register):
        headers, user = register(name="Biz", user_type="business")
        api_key = client.post("/api/auth/api-key", headers=headers).json()["data"]["apiKey"]

        response = client.get("/api/auth/me", headers={"X-API-Key": api_key})

        assert response.status_code == 200
        assert response.json()["data"]["id"] == user["id"]

        usage = client.get("/api/users/usage", headers=headers).json()["data"]
        counts = {entry["kind"]: entry["count"] for entry in usage["usageByKind"]}
        assert counts["api_call"] == 1
        assert usage["recentActivity"][0]["endpoint"] == "/api/auth/me"

    def test_new_api_key_revokes_previous(self, client, register):
        headers, _ = register(user_type="business")
        first = client.post("/api/auth/api-key", headers=headers).json()["data"]["apiKey"]
        second = client.post("/api/auth/api-key", headers=headers).json()["data"]["apiKey"]

        assert first != second
        assert client.get("/api/auth/me", headers={"X-API-Key": first}).status_code == 401
        assert client.get("/api/auth/me", headers={"X-API-Key": second}).status_code == 200

    def test_api_key_is_not_a_bearer_token(self, client, register):
        headers, _ = register(user_type="business")
        api_key = client.post("/api/auth/api-key", headers=headers).json()["data"]["apiKey"]

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {api_key}"})

        assert response.status_code == 401
