import pytest

from app.errors import MissingRequiredField, NotFound, Unauthenticated
from app.policies import ANONYMOUS
from app.schemas.suggestion import SuggestionCreate
from app.services import suggestions as suggestion_service


async def test_create_suggestion_starts_empty(db, alumnus):
    view = await suggestion_service.create_suggestion(
        db, alumnus.caller, SuggestionCreate(title=" Homecoming ", description="Campus tour", location="")
    )
    assert view.title == "Homecoming"
    assert view.location is None
    assert view.created_by == alumnus.id
    assert (view.vote_count, view.comment_count, view.comments) == (0, 0, [])


@pytest.mark.parametrize("title,description", [("", "desc"), ("title", "  ")])
async def test_create_suggestion_requires_title_and_description(db, alumnus, title, description):
    with pytest.raises(MissingRequiredField):
        await suggestion_service.create_suggestion(
            db, alumnus.caller, SuggestionCreate(title=title, description=description)
        )


async def test_anonymous_caller_cannot_suggest(db):
    with pytest.raises(Unauthenticated):
        await suggestion_service.create_suggestion(
            db, ANONYMOUS, SuggestionCreate(title="x", description="y")
        )


async def test_list_is_newest_first_with_counts(db, make_member):
    author, voter = await make_member(), await make_member()
    older = await suggestion_service.create_suggestion(
        db, author.caller, SuggestionCreate(title="Older", description="a")
    )
    newer = await suggestion_service.create_suggestion(
        db, author.caller, SuggestionCreate(title="Newer", description="b")
    )
    await suggestion_service.cast_vote(db, voter.caller, older.id)
    await suggestion_service.add_comment(db, voter.caller, older.id, "+1")

    listing = await suggestion_service.list_suggestions(db, voter.caller)
    assert [s.id for s in listing] == [newer.id, older.id]
    assert listing[1].vote_count == 1
    assert listing[1].comment_count == 1
    assert listing[1].has_voted is True
    assert listing[0].vote_count == 0


async def test_get_missing_suggestion(db):
    with pytest.raises(NotFound):
        await suggestion_service.get_suggestion(db, 123)


async def test_list_endpoint_is_public(client, alumnus):
    await client.post(
        "/suggestions", json={"title": "Picnic", "description": "Park"}, headers=alumnus.headers
    )
    response = await client.get("/suggestions")
    assert response.status_code == 200
    body = response.json()
    assert len(body) == 1
    assert body[0]["title"] == "Picnic"
    assert body[0]["has_voted"] is False


async def test_create_endpoint_reports_missing_fields(client, alumnus):
    response = await client.post("/suggestions", json={"title": "Only a title"}, headers=alumnus.headers)
    assert response.status_code == 422
    assert response.json() == {"error": "Missing required fields: description"}
