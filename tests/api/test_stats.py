"""Tests for summary statistics and health endpoints."""
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import utc_now
from models.bookmark import Bookmark


async def test_summary_stats(client: AsyncClient, db_session: AsyncSession) -> None:
    rows = [
        (None, None),
        ("read-later", "py"),
        ("working", "py"),
        ("working", "rs"),
        ("share", None),
        ("archived", None),
        ("irrelevant", None),
    ]
    for i, (action, topic) in enumerate(rows):
        db_session.add(
            Bookmark(url=f"https://example.com/{i}", title=f"B{i}", action=action, topic=topic),
        )
    await db_session.flush()

    response = await client.get("/stats/summary")

    assert response.status_code == 200
    data = response.json()
    assert data["total_bookmarks"] == 7
    assert data["needs_triage"] == 2
    assert data["active_projects"] == 2
    assert data["ready_to_share"] == 1
    assert data["archived"] == 1
    assert {s["topic"] for s in data["project_stats"]} == {"py", "rs"}
    assert all(s["latest_url"] for s in data["project_stats"])


async def test_summary_stats_needs_triage_matches_queue(
    client: AsyncClient, db_session: AsyncSession,
) -> None:
    for i, action in enumerate([None, "read-later", "", "share"]):
        db_session.add(Bookmark(url=f"https://example.com/{i}", title=f"B{i}", action=action))
    await db_session.flush()

    stats = (await client.get("/stats/summary")).json()
    triage = (await client.get("/bookmarks/triage", params={"limit": 100})).json()

    assert stats["needs_triage"] == triage["total"] == 3


async def test_summary_stats_ignores_deleted(
    client: AsyncClient, db_session: AsyncSession,
) -> None:
    db_session.add(
        Bookmark(url="https://example.com/gone", title="Gone", deleted_at=utc_now()),
    )
    await db_session.flush()

    data = (await client.get("/stats/summary")).json()

    assert data["total_bookmarks"] == 0
    assert data["needs_triage"] == 0


async def test_health_check(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "healthy"
    assert data["dialect"] in ("sqlite", "postgresql")
