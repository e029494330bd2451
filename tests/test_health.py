"""
Tests for health check and public pages
"""


def test_health_check(client):
    """Test basic health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["service"] == "web-service"
    assert data["status"] == "healthy"
    assert data["environment"] == "testing"
    assert data["backend"] == "configured"
    assert "timestamp" in data
    assert "version" in data


def test_home_page_anonymous(client):
    response = client.get("/")
    assert response.status_code == 200
    assert 'href="/auth/signup"' in response.text
    assert client.cookies.get("csrf_token")


def test_home_page_signed_in(auth_client):
    response = auth_client.get("/")
    assert response.status_code == 200
    assert 'action="/auth/logout"' in response.text


def test_api_docs_disabled(client):
    assert client.get("/docs").status_code == 404


def test_unknown_page_renders_html_error(client):
    response = client.get("/no-such-page")
    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/html")
