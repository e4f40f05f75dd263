"""
End-to-end tests of the API over a seeded in-memory store.
"""

import asyncio
from collections import Counter

from library.seeder import seed_database


def test_seeded_authors(client, seed_result):
    response = client.get("/authors")

    assert response.status_code == 200
    authors = response.json()
    assert len(authors) == 2
    assert sorted(author["name"] for author in authors) == ["J.K. Rowling", "J.R.R. Tolkien"]


def test_seeded_author_by_id(client, seed_result):
    tolkien_id = seed_result.author_ids["J.R.R. Tolkien"]

    response = client.get(f"/authors/{tolkien_id}")

    assert response.status_code == 200
    assert response.json() == {"id": tolkien_id, "name": "J.R.R. Tolkien"}


def test_seeded_books_resolve_authors(client, seed_result):
    response = client.get("/books")

    assert response.status_code == 200
    books = response.json()
    assert len(books) == 9
    assert all(book["author"] is not None for book in books)

    counts = Counter(book["author"]["name"] for book in books)
    assert counts == {"J.K. Rowling": 7, "J.R.R. Tolkien": 2}


def test_seeded_books_by_author(client, seed_result):
    tolkien_id = seed_result.author_ids["J.R.R. Tolkien"]

    response = client.get(f"/authors/{tolkien_id}/books")

    assert response.status_code == 200
    books = response.json()
    assert sorted(book["title"] for book in books) == ["The Hobbit", "The Lord of the Rings"]
    assert all(book["author"] == tolkien_id for book in books)


def test_reseed_invalidates_previous_ids(client, fake_database, seed_result):
    old_tolkien_id = seed_result.author_ids["J.R.R. Tolkien"]

    reseeded = asyncio.run(seed_database(fake_database))

    assert len(client.get("/authors").json()) == 2
    assert len(client.get("/books").json()) == 9

    response = client.get(f"/authors/{old_tolkien_id}")
    assert response.status_code == 404
    assert response.json() == {"error": "Author not found"}

    new_tolkien_id = reseeded.author_ids["J.R.R. Tolkien"]
    assert client.get(f"/authors/{new_tolkien_id}").status_code == 200
