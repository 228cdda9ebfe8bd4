"""Public reading surface: published books and their chapters."""

from datetime import datetime, timezone

from fastapi.testclient import TestClient


class TestPublicBook:
    def test_view_is_counted(self, client: TestClient, published_book):
        url = f"/api/v1/ktebnus/books/{published_book['slug']}"

        first = client.get(url)
        assert first.status_code == 200
        assert first.headers["cache-control"] == "no-store"
        book = first.json()["book"]
        assert book["views"] == 1
        assert book["writer"] == "Writer One"
        assert book["writerUsername"] == "writer"
        assert book["ownerId"] == "writer-uid"

        assert client.get(url).json()["book"]["views"] == 2

    def test_no_inc_skips_counting(self, client: TestClient, published_book):
        url = f"/api/v1/ktebnus/books/{published_book['slug']}"
        client.get(url)
        response = client.get(f"{url}?noInc=1")
        assert response.json()["book"]["views"] == 1

    def test_view_does_not_touch_updated_at(self, client: TestClient, published_book):
        url = f"/api/v1/ktebnus/books/{published_book['slug']}"
        before = client.get(f"{url}?noInc=1").json()["book"]["updatedAt"]
        client.get(url)
        assert client.get(f"{url}?noInc=1").json()["book"]["updatedAt"] == before

    def test_unpublished_books_are_hidden(
        self, client: TestClient, create_book, create_chapter, auth_headers
    ):
        draft = create_book()
        pending = create_book(title="Pending")
        create_chapter(pending["slug"])
        client.post(f"/api/v1/books/{pending['slug']}/publish", headers=auth_headers)

        for slug in (draft["slug"], pending["slug"], "missing-1234567"):
            response = client.get(f"/api/v1/ktebnus/books/{slug}")
            assert response.status_code == 404
            assert response.json() == {"success": False, "error": "Book not found"}


class TestPublicBookList:
    def _seed(self, create_book, publish):
        novel = create_book(title="Winter Roads", genre="Novel")
        poems = create_book(title="Songs of Zagros", genre="Poetry")
        create_book(title="Unpublished Roads", genre="Novel")
        publish(novel["slug"])
        publish(poems["slug"])
        return novel, poems

    def test_only_published_books(self, client: TestClient, create_book, publish):
        self._seed(create_book, publish)
        body = client.get("/api/v1/ktebnus/books").json()
        assert body["success"] is True
        assert body["pagination"] == {"total": 2, "page": 1, "limit": 12, "pages": 1}
        assert {b["title"] for b in body["books"]} == {"Winter Roads", "Songs of Zagros"}
        assert sorted(body["filters"]["genres"]) == ["novel", "poetry"]
        assert body["filters"]["years"] == [datetime.now(timezone.utc).year]

    def test_genre_filter_is_case_insensitive(
        self, client: TestClient, create_book, publish
    ):
        self._seed(create_book, publish)
        body = client.get("/api/v1/ktebnus/books?genre=NOVEL").json()
        assert [b["title"] for b in body["books"]] == ["Winter Roads"]

        everything = client.get("/api/v1/ktebnus/books?genre=all").json()
        assert everything["pagination"]["total"] == 2

    def test_search_title_and_writer(self, client: TestClient, create_book, publish):
        self._seed(create_book, publish)
        by_title = client.get("/api/v1/ktebnus/books?search=roads").json()
        assert [b["title"] for b in by_title["books"]] == ["Winter Roads"]

        by_writer = client.get("/api/v1/ktebnus/books?search=writer one").json()
        assert by_writer["pagination"]["total"] == 2

    def test_search_wildcards_are_literal(self, client: TestClient, create_book, publish):
        self._seed(create_book, publish)
        body = client.get("/api/v1/ktebnus/books", params={"search": "%"}).json()
        assert body["books"] == []
        assert body["pagination"]["pages"] == 1

    def test_year_filter(self, client: TestClient, create_book, publish):
        self._seed(create_book, publish)
        year = datetime.now(timezone.utc).year
        assert client.get(f"/api/v1/ktebnus/books?year={year}").json()[
            "pagination"
        ]["total"] == 2
        assert client.get("/api/v1/ktebnus/books?year=1999").json()["books"] == []

    def test_limit_is_clamped(self, client: TestClient, create_book, publish):
        self._seed(create_book, publish)
        body = client.get("/api/v1/ktebnus/books?limit=500&page=0").json()
        assert body["pagination"]["limit"] == 24
        assert body["pagination"]["page"] == 1


class TestPublicChapters:
    def test_lists_only_published_chapters(
        self, client: TestClient, create_book, create_chapter, publish
    ):
        book = create_book()
        create_chapter(book["slug"], title="One", isDraft=False)
        create_chapter(book["slug"], title="Hidden")
        create_chapter(book["slug"], title="Three", isDraft=False)
        publish(book["slug"])

        response = client.get(f"/api/v1/ktebnus/books/{book['slug']}/chapters")
        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, max-age=30"
        body = response.json()
        assert [c["title"] for c in body["chapters"]] == ["One", "Three"]
        assert "total" not in body

    def test_paged_listing(self, client: TestClient, create_book, create_chapter, publish):
        book = create_book()
        for i in range(3):
            create_chapter(book["slug"], title=f"Ch {i}", isDraft=False)
        publish(book["slug"])
        url = f"/api/v1/ktebnus/books/{book['slug']}/chapters"

        first = client.get(f"{url}?limit=2").json()
        assert [c["order"] for c in first["chapters"]] == [1, 2]
        assert first["total"] == 3
        assert first["hasMore"] is True

        last = client.get(f"{url}?skip=2&limit=2").json()
        assert [c["order"] for c in last["chapters"]] == [3]
        assert last["hasMore"] is False

    def test_single_chapter(self, client: TestClient, create_book, create_chapter, publish):
        book = create_book()
        chapter = create_chapter(book["slug"], isDraft=False)
        draft = create_chapter(book["slug"])
        publish(book["slug"])
        base = f"/api/v1/ktebnus/books/{book['slug']}/chapters"

        response = client.get(f"{base}/{chapter['id']}")
        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        body = response.json()["chapter"]
        assert body["content"] == chapter["content"]
        assert body["book"] == {
            "id": book["id"],
            "slug": book["slug"],
            "title": book["title"],
        }

        hidden = client.get(f"{base}/{draft['id']}")
        assert hidden.status_code == 404
        assert hidden.json()["error"] == "Chapter not found"
        assert client.get(f"{base}/garbage").status_code == 404

    def test_chapters_of_unpublished_book(
        self, client: TestClient, create_book, create_chapter
    ):
        book = create_book()
        chapter = create_chapter(book["slug"], isDraft=False)
        base = f"/api/v1/ktebnus/books/{book['slug']}/chapters"
        assert client.get(base).status_code == 404
        assert client.get(f"{base}/{chapter['id']}").status_code == 404
