"""Supabase database client for companies, bandi and matches."""

import logging
import os
from typing import Any, Dict, List, Optional

import httpx
from supabase import Client, create_client
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..models import Bando, CompanyProfile, MatchResult

logger = logging.getLogger(__name__)


def db_retry():
    """Retry decorator for Supabase calls: 3 attempts, exponential backoff."""
    return retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(httpx.HTTPError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


class SupabaseClient:
    """Client for the companies, bandi and matches tables."""

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
    ) -> None:
        """Initialize Supabase client from explicit args or env vars.

        Args:
            url: Supabase project URL (falls back to SUPABASE_URL env var).
            key: Supabase anon/service key (falls back to SUPABASE_KEY env var).
        """
        self._url = url or os.environ["SUPABASE_URL"]
        self._key = key or os.environ["SUPABASE_KEY"]
        self._client: Client = create_client(self._url, self._key)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @db_retry()
    def insert_company(self, profile: CompanyProfile) -> Dict[str, Any]:
        """Insert a submitted company profile.

        Args:
            profile: Validated CompanyProfile from the form.

        Returns:
            The inserted row as a dict (including the generated id).
        """
        response = (
            self._client.table("companies")
            .insert(profile.to_record())
            .execute()
        )
        row = response.data[0] if response.data else {}
        logger.info("Inserted company %s (id=%s)", profile.company_name, row.get("id"))
        return row

    @db_retry()
    def get_active_bandi(self) -> List[Bando]:
        """Fetch all bandi currently open for applications.

        Returns:
            List of Bando objects with status 'active'.
        """
        response = (
            self._client.table("bandi")
            .select("*")
            .eq("status", "active")
            .execute()
        )
        return [Bando(**row) for row in response.data]

    @db_retry()
    def save_matches(self, results: List[MatchResult]) -> int:
        """Persist one matches row per result.

        Args:
            results: Retained match results for a single company.

        Returns:
            Number of rows written.
        """
        if not results:
            return 0

        records = [
            {
                "company_id": result.company_id,
                "bando_id": result.bando_id,
                "match_score": result.total_score,
                "match_reasons": result.match_reasons(),
            }
            for result in results
        ]
        response = (
            self._client.table("matches")
            .insert(records)
            .execute()
        )
        logger.info("Saved %d matches for company %s", len(records), results[0].company_id)
        return len(response.data) if response.data else len(records)

    @db_retry()
    def get_matches(self, company_id: str, priority: Optional[str] = None) -> List[Dict[str, Any]]:
        """Fetch a company's matches joined with their bando, best first.

        Args:
            company_id: Company whose matches to load.
            priority: Optional priority filter (urgent, high, normal, low).

        Returns:
            List of match rows, each with a nested ``bando`` dict.
        """
        query = (
            self._client.table("matches")
            .select("*, bando:bandi(*)")
            .eq("company_id", company_id)
        )
        if priority is not None:
            query = query.eq("match_reasons->>priority", priority)
        response = query.order("match_score", desc=True).execute()
        return response.data
