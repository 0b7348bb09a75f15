import pytest

from coliving_service.app.services.template_editor import apply_command, insert_variable


def test_bold_wraps_selection():
    result = apply_command("Loyer mensuel", 0, 5, "bold")

    assert result.content == "**Loyer** mensuel"
    assert (result.selection_start, result.selection_end) == (2, 7)


def test_insert_variable_replaces_selection():
    result = insert_variable("Bonjour X,", 8, 9, "TENANT_FIRSTNAME")

    assert result.content == "Bonjour {{TENANT_FIRSTNAME}},"
    assert result.selection_start == result.selection_end == len("Bonjour {{TENANT_FIRSTNAME}}")


def test_insert_unknown_variable():
    with pytest.raises(ValueError):
        insert_variable("", 0, 0, "FAVORITE_COLOR")


def test_ordered_list_numbers_each_line():
    result = apply_command("intro\nun\ndeux\nfin", 6, 10, "ordered_list")

    assert result.content == "intro\n1. un\n2. deux\nfin"


def test_heading_prefixes_current_line():
    result = apply_command("Article 1\ntexte", 3, 3, "heading2")

    assert result.content == "## Article 1\ntexte"


def test_link_requires_url():
    with pytest.raises(ValueError):
        apply_command("site", 0, 4, "link")


def test_link_escapes_url():
    result = apply_command("site", 0, 4, "link", 'https://example.com/?a=1&b="><script>')

    assert result.content == '<a href="https://example.com/?a=1&amp;b=&quot;&gt;&lt;script&gt;">site</a>'


def test_unknown_command():
    with pytest.raises(ValueError):
        apply_command("x", 0, 1, "strike")


def test_editor_endpoint(client, admin_headers):
    response = client.post("/api/contract-templates/editor", headers=admin_headers, json={
        "content": "Bonjour ", "command": "insert_variable",
        "selectionStart": 8, "selectionEnd": 8, "value": "TENANT_FIRSTNAME"})

    assert response.status_code == 200
    assert response.json()["data"]["content"] == "Bonjour {{TENANT_FIRSTNAME}}"


def test_editor_endpoint_rejects_unknown_command(client, admin_headers):
    response = client.post("/api/contract-templates/editor", headers=admin_headers, json={
        "content": "x", "command": "strike", "selectionStart": 0, "selectionEnd": 1})

    assert response.status_code == 400
