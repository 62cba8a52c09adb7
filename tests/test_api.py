import pytest

SOP_DOCUMENT = {
    "filename": "sop.txt",
    "text": "GMP requires traceability. Validate every batch. Document each deviation.",
    "metadata": {"category": "sop", "tags": ["gmp"]},
}

OWNER_A = {"X-User-ID": "owner-a"}
OWNER_B = {"X-User-ID": "owner-b"}


def rag(client, body, headers=OWNER_A):
    return client.post("/rag", json=body, headers=headers)


def upload(client, document=SOP_DOCUMENT, headers=OWNER_A):
    response = rag(client, {"action": "upload", "document": document}, headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_root_reports_version(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "version" in response.json()


@pytest.mark.parametrize("headers", [{}, {"X-User-ID": ""}, {"X-User-ID": "   "}])
def test_missing_owner_is_unauthorized(client, headers):
    response = client.post("/rag", json={"action": "list"}, headers=headers)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "unauthorized"


def test_upload_action_returns_identifiers(client):
    body = upload(client)

    assert body["filename"] == "sop.txt"
    assert body["chunks"] == 1
    assert body["hasEmbeddings"] is True
    assert body["id"]
    assert "text" not in body


@pytest.mark.parametrize("document", [None, {}, {"filename": ""}, {"filename": "empty.txt", "text": "  "}])
def test_invalid_upload_is_bad_request(client, document):
    response = rag(client, {"action": "upload", "document": document})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_search_action_returns_ranked_results(client):
    uploaded = upload(client)

    response = rag(client, {"action": "search", "query": "validate batch", "options": {"limit": 5}})
    body = response.json()

    assert response.status_code == 200
    assert body["totalFound"] == len(body["results"]) == 1
    result = body["results"][0]
    assert result["documentId"] == uploaded["id"]
    assert result["filename"] == "sop.txt"
    assert result["chunkIndex"] == 0
    assert 0.0 <= result["similarity"] <= 1.0
    assert result["metadata"]["category"] == "sop"


@pytest.mark.parametrize("query", [None, "", 7])
def test_search_action_rejects_invalid_query(client, query):
    response = rag(client, {"action": "search", "query": query})

    assert response.status_code == 400


def test_search_action_respects_document_ids(client):
    first = upload(client)
    upload(client, {"filename": "copy.txt", "text": SOP_DOCUMENT["text"]})

    response = rag(client, {
        "action": "search",
        "query": "validate batch",
        "options": {"documentIds": [first["id"]], "threshold": 0.0},
    })

    assert {result["documentId"] for result in response.json()["results"]} == {first["id"]}


def test_list_action_is_tenant_scoped(client):
    mine = upload(client)
    upload(client, headers=OWNER_B)

    body = rag(client, {"action": "list"}).json()

    assert body["total"] == 1
    document = body["documents"][0]
    assert document["id"] == mine["id"]
    assert document["chunks"] == 1
    assert document["type"] == "text/plain"
    assert document["category"] == "sop"
    assert document["tags"] == ["gmp"]
    assert "createdAt" in document


def test_delete_action_removes_document(client):
    uploaded = upload(client)

    response = rag(client, {"action": "delete", "documentId": uploaded["id"]})

    assert response.status_code == 200
    assert response.json() == {
        "message": "Document deleted successfully",
        "documentId": uploaded["id"],
        "filename": "sop.txt",
    }
    assert rag(client, {"action": "list"}).json()["total"] == 0


def test_delete_action_of_other_tenant_is_not_found(client):
    uploaded = upload(client, headers=OWNER_B)

    response = rag(client, {"action": "delete", "documentId": uploaded["id"]})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_delete_action_requires_document_id(client):
    assert rag(client, {"action": "delete"}).status_code == 400


def test_stats_action(client):
    upload(client)
    upload(client, {"filename": "other.txt", "text": "Training records are retained.", "size": 1000})

    body = rag(client, {"action": "stats"}).json()

    assert body["totalDocuments"] == 2
    assert body["totalChunks"] == 2
    assert body["totalSize"] == len(SOP_DOCUMENT["text"]) + 1000
    assert body["chunksWithEmbeddings"] == 2
    assert body["embeddingCoverage"] == 100.0


@pytest.mark.parametrize("body", [{}, {"action": ""}, {"action": "explode"}])
def test_unknown_action_is_bad_request(client, body):
    response = rag(client, body)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_document_routes_cover_the_lifecycle(client):
    created = client.post("/documents", json=SOP_DOCUMENT, headers=OWNER_A)
    assert created.status_code == 201
    document_id = created.json()["id"]

    fetched = client.get(f"/documents/{document_id}", headers=OWNER_A)
    assert fetched.status_code == 200
    assert fetched.json()["textPreview"] == SOP_DOCUMENT["text"]

    assert client.get(f"/documents/{document_id}", headers=OWNER_B).status_code == 404

    listed = client.get("/documents", headers=OWNER_A).json()
    assert [doc["id"] for doc in listed["documents"]] == [document_id]

    searched = client.post("/documents/search", json={"query": "deviation", "options": {"threshold": 0.0}}, headers=OWNER_A).json()
    assert searched["results"][0]["documentId"] == document_id

    stats = client.get("/documents/stats", headers=OWNER_A).json()
    assert stats["totalChunks"] == 1

    deleted = client.delete(f"/documents/{document_id}", headers=OWNER_A)
    assert deleted.status_code == 200
    assert client.delete(f"/documents/{document_id}", headers=OWNER_A).status_code == 404


def test_text_file_upload(client):
    response = client.post(
        "/documents/file",
        files={"file": ("sop.txt", b"Validate every batch.\nDocument each deviation.", "text/plain")},
        data={"category": "sop", "tags": "gmp, batch"},
        headers=OWNER_A,
    )

    assert response.status_code == 201, response.text
    document = client.get(f"/documents/{response.json()['id']}", headers=OWNER_A).json()
    assert document["tags"] == ["gmp", "batch"]
    assert document["category"] == "sop"
    assert document["textPreview"] == "Validate every batch. Document each deviation."


def test_file_upload_rejects_unsupported_type(client):
    response = client.post(
        "/documents/file",
        files={"file": ("image.png", b"\x89PNG", "image/png")},
        headers=OWNER_A,
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_document_type_is_reported_as_mime_type(client):
    created = client.post("/documents", json={"filename": "plan.docx", "text": "CAPA plan text."}, headers=OWNER_A)

    document = client.get(f"/documents/{created.json()['id']}", headers=OWNER_A).json()

    assert document["type"] == "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def test_error_body_is_documented_in_openapi(client):
    schema = client.get("/openapi.json").json()

    assert "ErrorResponseSchema" in schema["components"]["schemas"]
    for path, method in (("/rag", "post"), ("/documents/{document_id}", "delete")):
        responses = schema["paths"][path][method]["responses"]
        for status_code in ("401", "404"):
            ref = responses[status_code]["content"]["application/json"]["schema"]["$ref"]
            assert ref.endswith("/ErrorResponseSchema")
