import jwt
import pytest

from app.schemas.auth import LoginRequest
from app.services.auth_service import AuthService, SettingsAdminVerifier
from app.services.jwt_service import JwtService
from atams.exceptions import UnauthorizedException

SECRET = "unit-test-secret-key-for-admin-tokens"


class AllowList:
    """Verifier backed by a plain dict"""

    def __init__(self, accounts):
        self.accounts = accounts

    def verify(self, username, password):
        return self.accounts.get(username) == password


@pytest.fixture
def jwt_service():
    return JwtService(secret=SECRET, algorithm="HS256", expire_minutes=5)


def test_settings_verifier():
    verifier = SettingsAdminVerifier(username="admin", password="s3cret")

    assert verifier.verify("admin", "s3cret") is True
    assert verifier.verify("admin", "wrong") is False
    assert verifier.verify("root", "s3cret") is False


def test_login_and_authenticate_with_pluggable_verifier(jwt_service):
    service = AuthService(verifier=AllowList({"registrar": "pw"}), jwt_service=jwt_service)

    token = service.login(LoginRequest(username="registrar", password="pw"))

    assert token.token_type == "bearer"
    assert token.expires_in == 300
    assert service.authenticate(token.access_token)["username"] == "registrar"


def test_login_rejects_unknown_account(jwt_service):
    service = AuthService(verifier=AllowList({}), jwt_service=jwt_service)

    with pytest.raises(UnauthorizedException) as exc_info:
        service.login(LoginRequest(username="admin", password="admin123"))

    assert exc_info.value.message == "Invalid username or password"


def test_expired_token_is_rejected():
    service = JwtService(secret=SECRET, algorithm="HS256", expire_minutes=0)
    token = service.generate_admin_token("admin")["token"]

    with pytest.raises(UnauthorizedException) as exc_info:
        service.verify_token(token)

    assert exc_info.value.message == "Token expired"


def test_token_signed_with_other_secret_is_rejected(jwt_service):
    forged = jwt.encode(
        {"sub": "admin", "iss": "student-attendance", "aud": "admin", "iat": 0, "exp": 4102444800},
        "another-secret-key-that-is-long-enough",
        algorithm="HS256"
    )

    with pytest.raises(UnauthorizedException):
        jwt_service.verify_token(forged)
