import asyncio
from datetime import date, timedelta

HEADER = "date,time,activity,repository,description"

FEED_TEXT = """\
date,time,activity,repository,description
2024-01-01,10:00:00,issue,repoB,filed bug
2024-01-02,09:00:00,commit,repoA,"fix, cleanup"
2024-01-03,12:00:00,release,repoA,v1.0.0
2024-01-02,08:00:00,fork,repoC,Forked upstream
"""


def make_feed(days: int, start: date = date(2024, 1, 1)) -> str:
    """A feed with one commit per day for `days` consecutive days."""
    rows = [HEADER]
    for offset in range(days):
        day = start + timedelta(days=offset)
        rows.append(f"{day.isoformat()},12:00:00,commit,repo,day {offset + 1}")
    return "\n".join(rows) + "\n"


class StubFetcher:
    """Replays queued responses; an Exception instance is raised instead of returned."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = 0
        self.closed = False

    async def fetch(self) -> str:
        item = self.responses[min(self.calls, len(self.responses) - 1)]
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


class GatedFetcher:
    """Blocks inside fetch() until the test opens the gate."""

    def __init__(self, text: str):
        self.text = text
        self.calls = 0
        self.closed = False
        self.started = asyncio.Event()
        self.gate = asyncio.Event()

    async def fetch(self) -> str:
        self.calls += 1
        self.started.set()
        await self.gate.wait()
        return self.text

    async def close(self) -> None:
        self.closed = True
