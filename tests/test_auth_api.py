import pytest
from argon2 import PasswordHasher

from app.services.auth_service import AuthService, ph, verify_password

from conftest import auth, register


@pytest.mark.asyncio
async def test_register_returns_token_for_submitted_email(client, tokens):
    r = await client.post("/create-account", json={"fullName": "A", "email": "a@x.com", "password": "p"})
    assert r.status_code == 200
    body = r.json()
    assert body["error"] is False
    assert body["message"] == "Registration Successful"
    assert body["user"] == {"fullName": "A", "email": "a@x.com"}
    assert tokens.verify(body["accessToken"]).subject_email == "a@x.com"


@pytest.mark.asyncio
async def test_password_is_not_stored_in_plaintext(client, database):
    await register(client, "a@x.com", password="s3cret-pass")
    doc = await database["user"].find_one({"email": "a@x.com"})
    assert "password" not in doc
    assert doc["password_hash"] != "s3cret-pass"
    assert doc["password_hash"].startswith("$argon2id$")


@pytest.mark.asyncio
async def test_register_twice_keeps_single_user(client, database):
    await register(client, "a@x.com")
    r = await client.post("/create-account", json={"fullName": "Other", "email": "A@X.com", "password": "q"})
    assert r.status_code == 200
    body = r.json()
    assert body["error"] is True
    assert body["message"] == "User Already Exists"
    assert "accessToken" not in body
    assert await database["user"].count_documents({}) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload,message",
    [
        ({"email": "a@x.com", "password": "p"}, "Full Name is required"),
        ({"fullName": "A", "password": "p"}, "Email is required"),
        ({"fullName": "A", "email": "a@x.com"}, "Password is required"),
        ({"fullName": "  ", "email": "a@x.com", "password": "p"}, "Full Name is required"),
        ({"fullName": "A", "email": "", "password": "p"}, "Email is required"),
        ({"fullName": "A", "email": "  ", "password": "p"}, "Email is required"),
    ],
)
async def test_register_missing_fields(client, database, payload, message):
    r = await client.post("/create-account", json=payload)
    assert r.status_code == 400
    assert r.json()["error"] is True
    assert r.json()["message"] == message
    assert await database["user"].count_documents({}) == 0


@pytest.mark.asyncio
async def test_register_accepts_any_non_empty_email(client):
    r = await client.post("/create-account", json={"fullName": "A", "email": "plainname", "password": "p"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "plainname"


@pytest.mark.asyncio
async def test_login_with_correct_credentials(client, tokens):
    await register(client, "a@x.com", password="right")
    r = await client.post("/login", json={"email": "a@x.com", "password": "right"})
    assert r.status_code == 200
    body = r.json()
    assert body["error"] is False
    assert body["message"] == "Login Successful"
    assert body["email"] == "a@x.com"
    assert tokens.verify(body["accessToken"]).subject_email == "a@x.com"


@pytest.mark.asyncio
async def test_login_email_is_case_insensitive(client):
    await register(client, "a@x.com", password="right")
    r = await client.post("/login", json={"email": " A@X.COM ", "password": "right"})
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_login_failures_do_not_reveal_which_case(client):
    await register(client, "a@x.com", password="right")
    wrong_pw = await client.post("/login", json={"email": "a@x.com", "password": "wrong"})
    no_user = await client.post("/login", json={"email": "ghost@x.com", "password": "right"})

    for r in (wrong_pw, no_user):
        assert r.status_code == 400
        body = {k: v for k, v in r.json().items() if k != "request_id"}
        assert body == {"error": True, "message": "Invalid email or password"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload,message",
    [({"password": "p"}, "Email is required"), ({"email": "a@x.com"}, "Password is required")],
)
async def test_login_missing_fields(client, payload, message):
    r = await client.post("/login", json=payload)
    assert r.status_code == 400
    assert r.json()["message"] == message


@pytest.mark.asyncio
async def test_get_user_summary(client):
    token = await register(client, "a@x.com", full_name="Alice")
    r = await client.get("/get-user", headers=auth(token))
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["fullName"] == "Alice"
    assert user["email"] == "a@x.com"
    assert user["id"]
    assert user["createdOn"]
    assert "passwordHash" not in user and "password_hash" not in user


@pytest.mark.asyncio
async def test_email_is_stored_and_signed_as_submitted(client, tokens, database):
    r = await client.post("/create-account", json={"fullName": "Alice", "email": "Alice@Example.com", "password": "p"})
    assert r.status_code == 200
    body = r.json()
    assert body["user"]["email"] == "Alice@Example.com"
    assert tokens.verify(body["accessToken"]).subject_email == "Alice@Example.com"

    doc = await database["user"].find_one({})
    assert doc["email"] == "Alice@Example.com"
    assert doc["email_key"] == "alice@example.com"

    r = await client.post("/login", json={"email": "alice@example.com", "password": "p"})
    assert r.status_code == 200
    assert tokens.verify(r.json()["accessToken"]).subject_email == "Alice@Example.com"


@pytest.mark.asyncio
async def test_concurrent_duplicate_registration_keeps_single_user(client, app, database):
    await register(client, "a@x.com")

    # Simula la carrera: la comprobación previa no ve al usuario ya insertado
    async def not_found_yet(email):
        return None

    app.state.auth_service.users.find_by_email = not_found_yet
    r = await client.post("/create-account", json={"fullName": "Other", "email": "A@x.com", "password": "q"})
    assert r.status_code == 200
    assert r.json()["error"] is True
    assert r.json()["message"] == "User Already Exists"
    assert await database["user"].count_documents({}) == 1


@pytest.mark.asyncio
async def test_login_rehashes_password_with_outdated_parameters(user_repo, tokens):
    old_hasher = PasswordHasher(time_cost=1, memory_cost=8192, parallelism=1)
    old_hash = old_hasher.hash("right")
    await user_repo.insert(full_name="A", email="a@x.com", password_hash=old_hash)
    service = AuthService(user_repo, tokens)

    res = await service.login(email="a@x.com", password="right")
    assert tokens.verify(res["access_token"]).subject_email == "a@x.com"

    stored = (await user_repo.find_by_email("a@x.com"))["password_hash"]
    assert stored != old_hash
    assert not ph.check_needs_rehash(stored)
    assert verify_password("right", stored)
