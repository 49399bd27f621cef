"""Auth & captcha API tests — challenge flow, login cookie, session introspection."""

import base64


async def _solve(client) -> tuple[str, int]:
    challenge = (await client.get("/api/v1/captcha")).json()
    return challenge["token"], challenge["operandA"] + challenge["operandB"]


async def _login(client, password, answer_offset=0, username="admin"):
    token, answer = await _solve(client)
    return await client.post("/api/v1/auth/login", json={
        "username": username,
        "password": password,
        "captchaToken": token,
        "captchaAnswer": str(answer + answer_offset),
    })


# --- Captcha ------------------------------------------------------------------

async def test_captcha_has_single_digit_operands(client):
    challenge = (await client.get("/api/v1/captcha")).json()
    assert 0 <= challenge["operandA"] <= 9
    assert 0 <= challenge["operandB"] <= 9
    assert challenge["token"].count(":") == 2


async def test_captcha_verify(client):
    token, answer = await _solve(client)
    res = await client.post("/api/v1/captcha/verify", json={"token": token, "answer": answer})
    assert res.json() == {"valid": True}

    res = await client.post(
        "/api/v1/captcha/verify", json={"token": token, "answer": f"0{answer}"},
    )
    assert res.json() == {"valid": True}

    res = await client.post(
        "/api/v1/captcha/verify", json={"token": token, "answer": answer + 1},
    )
    assert res.json() == {"valid": False}


# --- Login --------------------------------------------------------------------

async def test_login_sets_http_only_cookie(client, admin_password):
    res = await _login(client, admin_password)

    assert res.status_code == 200
    assert res.json() == {"success": True}
    set_cookie = res.headers["set-cookie"]
    assert set_cookie.startswith("auth_token=")
    assert "HttpOnly" in set_cookie
    assert "samesite=strict" in set_cookie.lower()
    assert "Max-Age=86400" in set_cookie


async def test_login_cookie_authenticates_following_requests(client, admin_password):
    await _login(client, admin_password)

    res = await client.get("/api/v1/auth/me")
    assert res.status_code == 200
    assert res.json() == {"user": {"username": "admin", "role": "admin"}}

    res = await client.post("/api/v1/config/theme", json={"theme": "ocean"})
    assert res.json() == {"theme": "ocean"}


async def test_login_with_wrong_captcha_is_400(client, admin_password):
    res = await _login(client, admin_password, answer_offset=1)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_CHALLENGE"


async def test_login_with_wrong_password_is_401(client):
    res = await _login(client, "wrong")
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Invalid credentials"


async def test_login_with_wrong_username_is_401(client, admin_password):
    res = await _login(client, admin_password, username="root")
    assert res.status_code == 401


async def test_logout_clears_cookie(client, admin_password):
    await _login(client, admin_password)
    res = await client.post("/api/v1/auth/logout")
    assert res.json() == {"success": True}

    res = await client.get("/api/v1/auth/me")
    assert res.status_code == 401


async def test_me_without_session_is_401(client):
    res = await client.get("/api/v1/auth/me")
    assert res.status_code == 401


async def test_me_accepts_bearer_token(client, auth_headers):
    res = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert res.json()["user"]["username"] == "admin"


async def test_crafted_session_cookie_is_401(client):
    payload = base64.urlsafe_b64encode(
        b'{"sub":"admin","role":"admin","iat":Infinity,"exp":1}',
    ).rstrip(b"=").decode()
    client.cookies.set("auth_token", f"{payload}.AAAA")

    res = await client.get("/api/v1/auth/me")
    assert res.status_code == 401


async def test_deeply_nested_session_cookie_is_401(client):
    payload = base64.urlsafe_b64encode(b"[" * 3000).rstrip(b"=").decode()
    res = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {payload}.AAAA"},
    )
    assert res.status_code == 401


async def test_overlong_captcha_answer_is_400(client):
    token, _ = await _solve(client)
    res = await client.post(
        "/api/v1/captcha/verify", json={"token": token, "answer": "1" * 5000},
    )
    assert res.status_code == 400


async def test_login_with_overlong_captcha_answer_is_400(client, admin_password):
    token, _ = await _solve(client)
    res = await client.post("/api/v1/auth/login", json={
        "username": "admin",
        "password": admin_password,
        "captchaToken": token,
        "captchaAnswer": "1" * 5000,
    })
    assert res.status_code == 400
