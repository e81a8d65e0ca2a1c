import pytest
from fakes import DummySession, FakeAdminUserRepository

from app.core.security import hash_password, verify_password
from app.services.admin_auth_service import AdminAuthService
from app.services.errors import (
    AdminAlreadyExistsError,
    AdminAuthenticationError,
    InvalidPasswordChangeError,
)


@pytest.fixture
def users() -> FakeAdminUserRepository:
    return FakeAdminUserRepository()


@pytest.fixture
def service(users: FakeAdminUserRepository) -> AdminAuthService:
    return AdminAuthService(session=DummySession(), users=users)


@pytest.mark.asyncio
async def test_setup_creates_first_admin_once(service: AdminAuthService) -> None:
    result = await service.setup_initial_admin()

    assert result.admin.username == "admin"
    assert verify_password(result.password, result.admin.password_hash)

    with pytest.raises(AdminAlreadyExistsError):
        await service.setup_initial_admin()


@pytest.mark.asyncio
async def test_login_issues_token_that_authenticates(
    service: AdminAuthService,
    users: FakeAdminUserRepository,
) -> None:
    admin = await users.create("owner", hash_password("s3cret-pass"))

    result = await service.login(username="  Owner ", password="s3cret-pass")
    authenticated = await service.authenticate(result.session_token)

    assert result.admin is admin
    assert authenticated is admin


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("username", "password"),
    [("owner", "wrong-pass"), ("ghost", "s3cret-pass"), ("   ", "s3cret-pass")],
)
async def test_login_rejects_bad_credentials(
    service: AdminAuthService,
    users: FakeAdminUserRepository,
    username: str,
    password: str,
) -> None:
    await users.create("owner", hash_password("s3cret-pass"))

    with pytest.raises(AdminAuthenticationError):
        await service.login(username=username, password=password)


@pytest.mark.asyncio
async def test_authenticate_rejects_missing_and_tampered_tokens(
    service: AdminAuthService,
    users: FakeAdminUserRepository,
) -> None:
    await users.create("owner", hash_password("s3cret-pass"))
    result = await service.login(username="owner", password="s3cret-pass")

    with pytest.raises(AdminAuthenticationError):
        await service.authenticate(None)
    with pytest.raises(AdminAuthenticationError):
        await service.authenticate(result.session_token + "x")


@pytest.mark.asyncio
async def test_authenticate_rejects_deleted_admin(
    service: AdminAuthService,
    users: FakeAdminUserRepository,
) -> None:
    admin = await users.create("owner", hash_password("s3cret-pass"))
    result = await service.login(username="owner", password="s3cret-pass")
    users.users.pop(admin.id)

    with pytest.raises(AdminAuthenticationError):
        await service.authenticate(result.session_token)


@pytest.mark.asyncio
async def test_change_password(
    service: AdminAuthService,
    users: FakeAdminUserRepository,
) -> None:
    admin = await users.create("owner", hash_password("s3cret-pass"))

    with pytest.raises(InvalidPasswordChangeError):
        await service.change_password(admin, "wrong", "new-password")
    with pytest.raises(InvalidPasswordChangeError):
        await service.change_password(admin, "s3cret-pass", "short")

    await service.change_password(admin, "s3cret-pass", "new-password")

    assert verify_password("new-password", admin.password_hash)
    assert not verify_password("s3cret-pass", admin.password_hash)
