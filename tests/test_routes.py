"""End-to-end tests of the restore flow over HTTP."""

from urllib.parse import parse_qs, urlsplit

from bs4 import BeautifulSoup
from fastapi.testclient import TestClient

from conftest import NEW_URL, OLD_URL, RecordingNotifier


def restore_key_from_email(notifier: RecordingNotifier) -> str:
    _, _, body = notifier.sent[-1]
    link = body.split()[-1]
    return parse_qs(urlsplit(link).query)["srk"][0]


def change_both_via_api(client: TestClient, value: str = NEW_URL) -> None:
    for name in ("home", "siteurl"):
        response = client.put(f"/api/v1/options/{name}", json={"value": value})
        assert response.status_code == 200
        assert response.json()["updated"] is True


def test_full_restore_flow(client: TestClient, notifier: RecordingNotifier):
    change_both_via_api(client)
    assert len(notifier.sent) == 2  # one email per request
    key = restore_key_from_email(notifier)

    response = client.get("/", params={"srk": key}, follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == f"{OLD_URL}/wp-admin?srsuccess=1"
    assert client.get("/api/v1/options/home").json()["value"] == OLD_URL
    assert client.get("/api/v1/options/siteurl").json()["value"] == OLD_URL

    dashboard = client.get("/wp-admin", params={"srsuccess": "1"})
    soup = BeautifulSoup(dashboard.content, "html.parser")
    notice = soup.select("#admin-notices .notice.notice-success")
    assert len(notice) == 1
    assert notice[0].get_text(strip=True) == "Your site url was successfully restored."

    reload = client.get("/wp-admin", params={"srsuccess": "1"})
    soup = BeautifulSoup(reload.content, "html.parser")
    assert soup.select("#admin-notices .notice") == []


def test_single_request_burst_sends_one_email(
    client: TestClient, notifier: RecordingNotifier
):
    response = client.post(
        "/wp-admin/options",
        data={"name": "home", "value": NEW_URL},
        follow_redirects=False,
    )
    assert response.status_code == 303

    response = client.put("/api/v1/options/home", json={"value": NEW_URL})
    assert response.json()["updated"] is False
    assert len(notifier.sent) == 1


def test_invalid_restore_key_aborts_request(client: TestClient):
    change_both_via_api(client)

    response = client.get("/wp-admin", params={"srk": "this-is-invalid."})

    assert response.status_code == 403
    soup = BeautifulSoup(response.content, "html.parser")
    assert soup.select_one("#error-message").get_text(strip=True) == (
        "Restore key is invalid."
    )
    assert client.get("/api/v1/options/home").json()["value"] == NEW_URL


def test_superseded_key_is_rejected(client: TestClient, notifier: RecordingNotifier):
    client.put("/api/v1/options/home", json={"value": NEW_URL})
    first_key = restore_key_from_email(notifier)
    client.put("/api/v1/options/siteurl", json={"value": NEW_URL})

    response = client.get("/", params={"srk": first_key})

    assert response.status_code == 403


def test_empty_restore_key_is_ignored(client: TestClient):
    response = client.get("/", params={"srk": ""})

    assert response.status_code == 200
    soup = BeautifulSoup(response.content, "html.parser")
    assert OLD_URL in soup.select_one("#site-identity").get_text()


def test_restore_status_endpoint(client: TestClient):
    assert client.get("/api/v1/restore/status").json() == {
        "key_pending": False,
        "backed_up_options": [],
        "can_restore": False,
    }

    client.put("/api/v1/options/home", json={"value": NEW_URL})

    data = client.get("/api/v1/restore/status").json()
    assert data == {
        "key_pending": True,
        "backed_up_options": ["home"],
        "can_restore": True,
    }


def test_admin_page_mentions_pending_restore(client: TestClient):
    client.put("/api/v1/options/siteurl", json={"value": NEW_URL})

    soup = BeautifulSoup(client.get("/wp-admin").content, "html.parser")

    assert "siteurl" in soup.select_one("#restore-pending").get_text()


def test_unknown_option_returns_problem_details(client: TestClient):
    response = client.get("/api/v1/options/does-not-exist")

    assert response.status_code == 404
    data = response.json()
    assert data["status"] == 404
    assert data["title"] == "UnknownOptionError"
    assert data["instance"] == "/api/v1/options/does-not-exist"


def test_invalid_option_value_is_rejected(client: TestClient):
    response = client.put("/api/v1/options/home", json={"value": "x" * 5000})

    assert response.status_code == 422


def test_non_ascii_restore_key_is_rejected(client: TestClient):
    change_both_via_api(client)

    response = client.get("/", params={"srk": "clé-invalide"})

    assert response.status_code == 403


def test_admin_page_lists_all_options(client: TestClient):
    soup = BeautifulSoup(client.get("/wp-admin").content, "html.parser")

    rows = [
        [cell.get_text(strip=True) for cell in row.select("td")]
        for row in soup.select("#option-list tr")
        if row.select("td")
    ]
    assert rows == [
        ["admin_email", "admin@old.example"],
        ["home", OLD_URL],
        ["siteurl", OLD_URL],
    ]
