"""
LeetCode Service
----------------
Fetches problem metadata (title, difficulty, topic tags) from the LeetCode
GraphQL API so admins can add problems to the bank by slug.
"""

import asyncio
import logging
import time
from typing import Dict, Optional

import aiohttp

import config
from utils.logic import generate_problem_url
from utils.models import Problem

logger = logging.getLogger(__name__)


class LeetCodeUnavailableError(Exception):
    """LeetCode could not be reached or rejected the request"""


class LeetCodeService:
    GRAPHQL_ENDPOINT = config.LEETCODE_GRAPHQL_ENDPOINT

    MAX_RETRIES = 3
    BASE_DELAY = 2.0
    REQUEST_TIMEOUT = 15

    CACHE_TTL = 86400  # 24 hours in seconds

    PROBLEM_QUERY = """
    query questionData($titleSlug: String!) {
        question(titleSlug: $titleSlug) {
            questionId
            title
            titleSlug
            difficulty
            topicTags {
                name
            }
        }
    }
    """

    def __init__(self):
        self.session: Optional[aiohttp.ClientSession] = None
        # {slug: {"data": Problem, "timestamp": float}}
        self._metadata_cache: Dict[str, Dict] = {}

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": "DailyCoderHub/1.0"
                }
            )
        return self.session

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
        self._metadata_cache.clear()
        logger.info("[LeetCode] Session closed and cache cleared")

    # -----------------------------
    # Retry Logic with Exponential Backoff
    # -----------------------------

    async def _request_with_retry(self, payload: dict) -> Optional[dict]:
        """
        POST a GraphQL payload, retrying rate limits (429), server errors (5xx),
        timeouts and network errors with exponential backoff.
        """
        session = await self._get_session()

        for attempt in range(self.MAX_RETRIES):
            delay = self.BASE_DELAY * (2 ** attempt)
            try:
                async with session.post(
                    self.GRAPHQL_ENDPOINT,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.REQUEST_TIMEOUT)
                ) as response:
                    if response.status == 200:
                        return await response.json()

                    if response.status == 429:
                        retry_after = int(response.headers.get("Retry-After", delay))
                        logger.warning(f"[LeetCode] Rate limited (429). Waiting {retry_after}s... "
                                       f"(attempt {attempt + 1}/{self.MAX_RETRIES})")
                        await asyncio.sleep(retry_after)
                        continue

                    if response.status >= 500:
                        logger.warning(f"[LeetCode] Server error {response.status}. Retry in {delay}s... "
                                       f"(attempt {attempt + 1}/{self.MAX_RETRIES})")
                        await asyncio.sleep(delay)
                        continue

                    # Client error (4xx except 429) - don't retry
                    response_text = await response.text()
                    logger.error(f"[LeetCode] Client error {response.status}: {response_text[:300]}")
                    return None

            except asyncio.TimeoutError:
                logger.warning(f"[LeetCode] Timeout after {self.REQUEST_TIMEOUT}s. Retry in {delay}s...")
                await asyncio.sleep(delay)

            except aiohttp.ClientError as e:
                logger.warning(f"[LeetCode] Network error: {type(e).__name__}: {e}. Retry in {delay}s...")
                await asyncio.sleep(delay)

        logger.error(f"[LeetCode] All {self.MAX_RETRIES} retries exhausted. API unavailable.")
        return None

    # -----------------------------
    # Problem Metadata (with Caching)
    # -----------------------------

    @staticmethod
    def parse_question(question: dict) -> Problem:
        slug = question["titleSlug"]
        return Problem(
            id=slug,
            title=question["title"],
            platform="LeetCode",
            url=generate_problem_url("LeetCode", slug),
            difficulty=question["difficulty"],
            tags=[tag["name"] for tag in question.get("topicTags") or []],
        )

    async def get_problem_metadata(self, slug: str) -> Optional[Problem]:
        """
        Fetch a problem from LeetCode as a Problem record keyed by its slug.

        Returns None when the problem does not exist. Raises
        LeetCodeUnavailableError when the API cannot answer.
        """
        cached = self._metadata_cache.get(slug)
        if cached:
            if time.time() - cached["timestamp"] < self.CACHE_TTL:
                return cached["data"]
            del self._metadata_cache[slug]

        data = await self._request_with_retry({
            "query": self.PROBLEM_QUERY,
            "variables": {"titleSlug": slug}
        })
        if not data:
            raise LeetCodeUnavailableError(f"LeetCode did not answer for {slug}")

        question = (data.get("data") or {}).get("question")
        if not question:
            return None

        try:
            result = self.parse_question(question)
        except (KeyError, TypeError) as e:
            logger.error(f"[LeetCode] Unexpected question payload for {slug}: {e}")
            return None

        self._metadata_cache[slug] = {"data": result, "timestamp": time.time()}
        return result


# -----------------------------
# Singleton Access
# -----------------------------

_leetcode_service: Optional[LeetCodeService] = None


def get_leetcode_api() -> LeetCodeService:
    global _leetcode_service
    if _leetcode_service is None:
        _leetcode_service = LeetCodeService()
    return _leetcode_service


async def close_leetcode_api():
    global _leetcode_service
    if _leetcode_service:
        await _leetcode_service.close()
        _leetcode_service = None
