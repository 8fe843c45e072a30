"""Protocol every favicon discovery strategy implements."""

from typing import Optional, Protocol

from favicon_finder.models import CandidateURL


class FaviconStrategy(Protocol):
    """Protocol for a discovery method the finder falls back through.

    Note: Implementations must be deterministic for unchanged inputs and return at
    most one candidate. Ordinary absence of a favicon is reported by returning None;
    a transport failure may raise `NetworkFailureError`. The finder treats both the
    same way and moves on to the next strategy.
    """

    async def locate(
        self,
        site_url: str,
        hint: Optional[str] = None,
        follow_meta_refresh_redirect: bool = False,
    ) -> Optional[CandidateURL]:  # pragma: no cover
        """Locate the best favicon URL for `site_url`.

        Args:
            site_url: Base URL of the site.
            hint: Replaces the strategy's default lookup (selector, path or file name).
            follow_meta_refresh_redirect: Search the document a root-level
                `<meta http-equiv="refresh">` points to instead of the root document.
        Returns:
            The located candidate, or None if this strategy found nothing.
        Raises:
            NetworkFailureError: If the site could not be reached.
        """
        ...
