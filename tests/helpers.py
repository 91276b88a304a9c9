"""HTTP helpers shared by the API tests."""

API = "/api/v1"

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "AdminPass1"
DEFAULT_PASSWORD = "Abcdef12"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, name: str, email: str, password: str = DEFAULT_PASSWORD):
    return client.post(
        f"{API}/auth/register",
        json={"name": name, "email": email, "password": password},
    )


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    response = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


class Account:
    """A logged-in user: id, tokens and ready-made auth headers."""
    
    def __init__(self, body: dict):
        self.id = body["user"]["id"]
        self.role = body["user"]["role"]
        self.access_token = body["accessToken"]
        self.refresh_token = body["refreshToken"]
        self.headers = bearer(self.access_token)


def sign_up(client, name: str, email: str) -> Account:
    response = register(client, name, email)
    assert response.status_code == 201, response.text
    return Account(login(client, email))


def create_task(client, account: Account, **fields) -> dict:
    fields.setdefault("title", "Task")
    response = client.post(f"{API}/tasks", json=fields, headers=account.headers)
    assert response.status_code == 201, response.text
    return response.json()["task"]
