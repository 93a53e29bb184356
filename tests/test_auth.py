import asyncio

from notebook_tui.app.security.auth import AuthManager


def test_hash_and_verify(config):
    auth = AuthManager()

    async def scenario():
        password_hash = await auth.hash_password("password")
        return (
            password_hash,
            await auth.verify_password("password", password_hash),
            await auth.verify_password("Password", password_hash),
        )

    password_hash, good, bad = asyncio.run(scenario())

    assert password_hash.startswith("$argon2")
    assert "password" not in password_hash
    assert good == (True, False)
    assert bad == (False, False)


def test_invalid_hash_is_rejected(config):
    assert asyncio.run(AuthManager().verify_password("password", "not-a-hash")) == (False, False)


def test_changed_parameters_request_rehash(config):
    password_hash = asyncio.run(AuthManager().hash_password("password"))

    config.security.argon2_time_cost = 2
    valid, needs_rehash = asyncio.run(AuthManager().verify_password("password", password_hash))

    assert valid
    assert needs_rehash
