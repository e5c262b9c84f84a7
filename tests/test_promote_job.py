import json

import pytest
from sqlalchemy import func, select

from app.config import settings
from app.jobs import promote as promote_job
from app.models.event import Event
from app.models.event_suggestion import EventSuggestion
from app.models.event_vote import EventVote


@pytest.fixture(autouse=True)
def job_uses_test_database(engine, session_factory, monkeypatch):
    monkeypatch.setattr(promote_job, "engine", engine)
    monkeypatch.setattr(promote_job, "async_session", session_factory)


async def test_missing_service_key_exits_with_code_2(monkeypatch, capsys):
    monkeypatch.setattr(settings, "SERVICE_ROLE_KEY", "")

    assert await promote_job.main() == 2
    assert json.loads(capsys.readouterr().out) == {"error": "Missing service role key"}


async def test_invalid_threshold_exits_with_code_2(monkeypatch, capsys):
    monkeypatch.setattr(settings, "SERVICE_ROLE_KEY", "test-service-key")

    assert await promote_job.main(threshold=0) == 2
    assert "error" in json.loads(capsys.readouterr().out)


async def test_run_prints_promoted_ids(session_factory, make_member, monkeypatch, capsys):
    monkeypatch.setattr(settings, "SERVICE_ROLE_KEY", "test-service-key")
    author, voter = await make_member(), await make_member()
    async with session_factory() as session:
        suggestion = EventSuggestion(title="Hackathon reunion", description="Weekend", created_by=author.id)
        session.add(suggestion)
        await session.flush()
        session.add(EventVote(suggestion_id=suggestion.id, voter_id=voter.id))
        await session.commit()
        suggestion_id = suggestion.id

    assert await promote_job.main(threshold=1) == 0
    assert json.loads(capsys.readouterr().out) == {"promoted": [suggestion_id]}

    async with session_factory() as session:
        assert (await session.execute(select(func.count(Event.id)))).scalar() == 1
