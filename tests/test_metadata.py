import pytest

from plex_movie_sync.metadata import MovieRecord, flatten_tags, map_movie, poster_path


def test_map_movie_full_record():
    raw = {
        "ratingKey": "123",
        "title": "Heat",
        "year": 1995,
        "summary": "A group of professional bank robbers...",
        "thumb": "/library/metadata/123/thumb/1700000000",
        "art": "/library/metadata/123/art/1700000000",
        "duration": 10200000,
        "rating": 8.3,
        "contentRating": "R",
        "studio": "Warner Bros.",
        "Genre": [{"tag": "Crime"}, {"tag": "Drama"}],
        "Director": [{"tag": "Michael Mann"}],
        "Writer": [{"tag": "Michael Mann"}],
        "Role": [{"tag": "Al Pacino"}, {"tag": "Robert De Niro"}, {"tag": "Val Kilmer"}],
        "addedAt": 1600000000,
        "updatedAt": 1700000000,
        "viewCount": 2,
    }

    movie = map_movie(raw)

    assert movie.id == "123"
    assert movie.title == "Heat"
    assert movie.year == 1995
    assert movie.duration == 10200000
    assert movie.genres == ["Crime", "Drama"]
    assert movie.directors == ["Michael Mann"]
    assert movie.writers == ["Michael Mann"]
    assert movie.actors == ["Al Pacino", "Robert De Niro", "Val Kilmer"]
    assert movie.updatedAt == 1700000000
    assert movie.contentRating == "R"
    assert movie.viewCount == 2


def test_thumb_is_a_placeholder_until_the_poster_is_downloaded():
    movie = map_movie({"ratingKey": 42, "thumb": "/library/metadata/42/thumb/1"})
    assert movie.id == "42"
    assert movie.thumb == "42.jpg"


@pytest.mark.parametrize(
    "raw",
    [
        {"ratingKey": "1"},
        {"ratingKey": "2", "title": "No tags", "Genre": None},
        {"ratingKey": "3", "title": "Odd", "year": "not a year", "rating": "n/a", "Role": "x"},
        {"ratingKey": "4", "Genre": [{"id": 5}, {"tag": ""}, "Drama"]},
    ],
)
def test_map_movie_never_raises_on_optional_fields(raw):
    movie = map_movie(raw)
    assert movie.genres == []
    assert movie.directors == []
    assert movie.writers == []
    assert movie.actors == []


def test_flatten_tags_keeps_server_order():
    assert flatten_tags([{"tag": "b"}, {"tag": "a"}, {"tag": "c"}]) == ["b", "a", "c"]


def test_to_dict_omits_unset_optional_fields():
    data = MovieRecord(id="7", title="Seven", thumb="7.jpg").to_dict()

    assert data == {
        "id": "7",
        "title": "Seven",
        "summary": "",
        "thumb": "7.jpg",
        "genres": [],
        "directors": [],
        "writers": [],
        "actors": [],
    }


def test_poster_path_uses_updated_at_to_bust_the_cache():
    assert poster_path(MovieRecord(id="9", title="", thumb="", updatedAt=55)) == "/library/metadata/9/thumb/55"
    assert poster_path(MovieRecord(id="9", title="", thumb="")) == "/library/metadata/9/thumb"
