from tests.conftest import API, STRONG_PASSWORD, auth_header, popup_payload, signup, start_google

CALLBACK = f"{API}/auth/google/callback"


def finish_google(client, state, code="auth-code"):
    return client.get(CALLBACK, params={"code": code, "state": state})


def test_start_redirects_to_google_with_state(client):
    response = client.get(f"{API}/auth/google/start", params={"flow": "signup"}, follow_redirects=False)
    assert response.status_code == 302
    location = response.headers["location"]
    assert location.startswith("https://accounts.google.com/")
    assert "state=" in location
    assert "client_id=client-id" in location


def test_start_rejects_unknown_flow(client):
    response = client.get(f"{API}/auth/google/start", params={"flow": "hijack"}, follow_redirects=False)
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_input"


def test_result_page_posts_to_frontend_origin_only(client, fake_google):
    response = finish_google(client, start_google(client))
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers["cache-control"] == "no-store"
    assert 'postMessage(data, "http://localhost:5173")' in response.text
    assert '"*"' not in response.text


def test_login_with_existing_email_links_account(client, fake_google):
    signup(client, email="a@acme.io")
    fake_google.profile = {"sub": "google-sub-a", "email": "A@ACME.io", "name": "A"}

    payload = popup_payload(finish_google(client, start_google(client, "login")))
    assert payload["status"] == "ok"
    assert payload["source"] == "oauth-google"

    session = client.get(f"{API}/auth/session", headers=auth_header(payload["token"])).json()
    assert session["email"] == "a@acme.io"

    profile = client.get(f"{API}/profile", headers=auth_header(payload["token"])).json()
    assert profile["oauth_provider"] == "google"
    assert profile["has_password"] is True


def test_linked_account_still_logs_in_with_password(client, fake_google):
    signup(client, email="a@acme.io")
    fake_google.profile = {"sub": "google-sub-a", "email": "a@acme.io"}
    finish_google(client, start_google(client))

    response = client.post(f"{API}/auth/login", json={"email": "a@acme.io", "password": STRONG_PASSWORD})
    assert response.status_code == 200


def test_signup_flow_for_existing_user_is_already_registered(client, fake_google):
    signup(client, email="a@acme.io")
    fake_google.profile = {"sub": "google-sub-a", "email": "a@acme.io", "name": "A"}

    payload = popup_payload(finish_google(client, start_google(client, "signup")))
    assert payload["status"] == "already_registered"
    assert "token" not in payload

    # No second account was created
    response = signup(client, email="a@acme.io")
    assert response.status_code == 409


def test_unknown_identity_needs_signup_then_completes_with_ticket(client, fake_google):
    payload = popup_payload(finish_google(client, start_google(client, "login")))
    assert payload["status"] == "needs_signup"
    assert payload["email"] == "new.user@acme.io"
    assert payload["name"] == "New User"
    assert "token" not in payload

    response = client.post(
        f"{API}/auth/signup",
        json={
            "email": payload["email"],
            "oauth_ticket": payload["signup_ticket"],
            "display_name": "New User",
            "monthly_income": 40000,
            "currency": "USD",
        },
    )
    assert response.status_code == 201
    token = response.json()["token"]

    profile = client.get(f"{API}/profile", headers=auth_header(token)).json()
    assert profile["has_password"] is False
    assert profile["oauth_provider"] == "google"
    assert profile["currency"] == "USD"

    # The account now signs in through Google directly
    again = popup_payload(finish_google(client, start_google(client, "login")))
    assert again["status"] == "ok"


def test_oauth_only_account_cannot_use_password_login(client, fake_google):
    payload = popup_payload(finish_google(client, start_google(client)))
    client.post(
        f"{API}/auth/signup",
        json={
            "email": payload["email"],
            "oauth_ticket": payload["signup_ticket"],
            "display_name": "New User",
            "monthly_income": 40000,
            "currency": "INR",
        },
    )
    response = client.post(f"{API}/auth/login", json={"email": payload["email"], "password": STRONG_PASSWORD})
    assert response.status_code == 401
    assert response.json() == {"error": "invalid_credentials"}


def test_ticket_signup_rejects_mismatched_email(client, fake_google):
    payload = popup_payload(finish_google(client, start_google(client)))
    response = client.post(
        f"{API}/auth/signup",
        json={
            "email": "someone.else@acme.io",
            "oauth_ticket": payload["signup_ticket"],
            "display_name": "Someone",
            "monthly_income": 40000,
        },
    )
    assert response.status_code == 400
    assert "email" in response.json()["details"]


def test_forged_ticket_is_rejected(client):
    response = client.post(
        f"{API}/auth/signup",
        json={
            "email": "new.user@acme.io",
            "oauth_ticket": "not-a-ticket",
            "display_name": "New User",
            "monthly_income": 40000,
        },
    )
    assert response.status_code == 400
    assert "oauth_ticket" in response.json()["details"]


def test_exchange_failure_reports_generic_error(client, fake_google):
    fake_google.token_status = 400
    payload = popup_payload(finish_google(client, start_google(client)))
    assert payload == {"status": "error", "message": "Sign-in failed", "source": "oauth-google"}
    assert not any("userinfo" in url for url in fake_google.calls)


def test_profile_fetch_failure_reports_generic_error(client, fake_google):
    fake_google.profile_status = 401
    payload = popup_payload(finish_google(client, start_google(client)))
    assert payload["status"] == "error"
    assert payload["message"] == "Sign-in failed"


def test_state_mismatch_is_rejected_without_calling_google(client, fake_google):
    start_google(client)
    payload = popup_payload(finish_google(client, "forged-state"))
    assert payload["status"] == "error"
    assert fake_google.calls == []


def test_state_is_single_use(client, fake_google):
    state = start_google(client)
    assert popup_payload(finish_google(client, state))["status"] == "needs_signup"
    assert popup_payload(finish_google(client, state))["status"] == "error"


def test_provider_error_param_is_reported_generically(client, fake_google):
    state = start_google(client)
    response = client.get(CALLBACK, params={"error": "access_denied", "state": state})
    assert popup_payload(response)["status"] == "error"
    assert fake_google.calls == []


def test_start_without_google_config_is_unavailable(client, settings):
    settings.GOOGLE_CLIENT_ID = ""
    response = client.get(f"{API}/auth/google/start", follow_redirects=False)
    assert response.status_code == 503
    assert response.json() == {"error": "oauth_not_configured"}


def test_ticket_signup_requires_currency(client, fake_google):
    payload = popup_payload(finish_google(client, start_google(client)))
    response = client.post(
        f"{API}/auth/signup",
        json={
            "email": payload["email"],
            "oauth_ticket": payload["signup_ticket"],
            "display_name": "New User",
            "monthly_income": 40000,
        },
    )
    assert response.status_code == 400
    assert "currency" in response.json()["details"]


def test_non_object_profile_reports_generic_error(client, fake_google):
    fake_google.profile = ["not", "an", "object"]
    response = finish_google(client, start_google(client))
    assert response.status_code == 200
    assert popup_payload(response) == {"status": "error", "message": "Sign-in failed", "source": "oauth-google"}


def test_non_object_token_response_reports_generic_error(client, fake_google):
    fake_google.token_body = ["access_token"]
    response = finish_google(client, start_google(client))
    assert response.status_code == 200
    assert popup_payload(response)["status"] == "error"
    assert not any("userinfo" in url for url in fake_google.calls)


def test_token_response_without_access_token_reports_generic_error(client, fake_google):
    fake_google.token_body = {"token_type": "Bearer"}
    assert popup_payload(finish_google(client, start_google(client)))["status"] == "error"


def test_consent_url_parameters(client):
    response = client.get(f"{API}/auth/google/start", follow_redirects=False)
    location = response.headers["location"]
    assert "redirect_uri=" in location
    assert "prompt=select_account" in location
    assert "scope=openid+email+profile" in location or "scope=openid%20email%20profile" in location


def test_signup_with_both_password_and_ticket_is_rejected(client, fake_google):
    payload = popup_payload(finish_google(client, start_google(client)))
    response = client.post(
        f"{API}/auth/signup",
        json={
            "email": payload["email"],
            "password": STRONG_PASSWORD,
            "oauth_ticket": payload["signup_ticket"],
            "display_name": "New User",
            "monthly_income": 40000,
            "currency": "INR",
        },
    )
    assert response.status_code == 400
    assert "password" in response.json()["details"]

    # Nothing was created, so the ticket still completes a signup
    response = client.post(
        f"{API}/auth/signup",
        json={
            "email": payload["email"],
            "oauth_ticket": payload["signup_ticket"],
            "display_name": "New User",
            "monthly_income": 40000,
            "currency": "INR",
        },
    )
    assert response.status_code == 201
