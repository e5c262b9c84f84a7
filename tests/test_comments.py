import pytest

from app.errors import ConstraintViolation, EmptyContent, Unauthenticated
from app.policies import ANONYMOUS
from app.schemas.suggestion import SuggestionCreate
from app.services import suggestions as suggestion_service


@pytest.fixture
async def suggestion(db, alumnus):
    return await suggestion_service.create_suggestion(
        db, alumnus.caller, SuggestionCreate(title="Career fair", description="Invite recruiters")
    )


async def test_comments_come_back_oldest_first(db, alumnus, suggestion):
    for text in ("first", "second", "third"):
        await suggestion_service.add_comment(db, alumnus.caller, suggestion.id, text)

    view = await suggestion_service.get_suggestion(db, suggestion.id)
    assert [c.content for c in view.comments] == ["first", "second", "third"]
    assert view.comment_count == 3


async def test_comment_content_is_trimmed(db, alumnus, suggestion):
    comment = await suggestion_service.add_comment(db, alumnus.caller, suggestion.id, "  count me in  ")
    assert comment.content == "count me in"
    assert comment.commenter_id == alumnus.id


@pytest.mark.parametrize("content", ["", "   ", None])
async def test_blank_comment_is_rejected(db, alumnus, suggestion, content):
    with pytest.raises(EmptyContent):
        await suggestion_service.add_comment(db, alumnus.caller, suggestion.id, content)

    view = await suggestion_service.get_suggestion(db, suggestion.id)
    assert view.comments == []


async def test_anonymous_caller_cannot_comment(db, suggestion):
    with pytest.raises(Unauthenticated):
        await suggestion_service.add_comment(db, ANONYMOUS, suggestion.id, "hello")


async def test_comment_on_missing_suggestion(db, alumnus):
    with pytest.raises(ConstraintViolation):
        await suggestion_service.add_comment(db, alumnus.caller, 4242, "hello")


async def test_comment_endpoint(client, alumnus):
    created = await client.post(
        "/suggestions",
        json={"title": "Book club", "description": "Monthly"},
        headers=alumnus.headers,
    )
    suggestion_id = created.json()["id"]

    response = await client.post(
        f"/suggestions/{suggestion_id}/comments", json={"content": "Great idea"}, headers=alumnus.headers
    )
    assert response.status_code == 201
    assert response.json()["content"] == "Great idea"

    response = await client.post(
        f"/suggestions/{suggestion_id}/comments", json={"content": "  "}, headers=alumnus.headers
    )
    assert response.status_code == 422
    assert response.json() == {"error": "Comment cannot be empty"}
