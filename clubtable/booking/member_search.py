"""Search-as-you-type over club members"""

import asyncio
from typing import List, Optional

import structlog

from clubtable.client.api import ClubApi
from clubtable.config import settings
from clubtable.errors import ApiError
from clubtable.schemas.member import Member

logger = structlog.get_logger()


class MemberSearch:
    """Debounced member lookup where a new query cancels the previous one.

    Each call to ``search`` waits ``debounce`` seconds before hitting the
    API. If another query arrives first, the older task is cancelled, which
    also aborts its request if it was already in flight.
    """

    def __init__(
        self,
        api: ClubApi,
        debounce: Optional[float] = None,
        min_length: Optional[int] = None,
    ):
        self.api = api
        self.debounce = settings.member_search_debounce_seconds if debounce is None else debounce
        self.min_length = settings.member_search_min_length if min_length is None else min_length
        self.query = ""
        self.results: List[Member] = []
        self._task: Optional[asyncio.Task] = None

    def search(self, query: str) -> asyncio.Task:
        """Start a lookup for ``query``, superseding any pending one"""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("Member search superseded", previous=self.query, query=query)

        self.query = query
        self._task = asyncio.create_task(self._run(query))
        return self._task

    async def _run(self, query: str) -> List[Member]:
        term = query.strip()
        if len(term) < self.min_length:
            self.results = []
            return self.results

        await asyncio.sleep(self.debounce)

        try:
            members = await self.api.list_members(search=term)
        except ApiError as e:
            logger.warning("Member search failed", query=term, error=e.message)
            members = []

        self.results = members
        return members

    async def close(self) -> None:
        """Cancel whatever is pending"""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
