"""
Retrieval strategies for the Comprehensive Rules text and the resolver that
walks them in priority order.
"""

import codecs
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import quote

import requests

from ...config import FETCH_TIMEOUT, LOCAL_RULES_PATH, PROXY_TEMPLATES, USER_AGENT
from ...error_handling import (
    AllSourcesExhausted,
    HttpStatusError,
    NetworkFailure,
    SourceError,
    SourceTimeout,
    ValidationFailure,
)
from ...models import SourceAttempt
from .validation import ContentValidator

logger = logging.getLogger(__name__)

# The transfer deadline is checked once per chunk
CHUNK_SIZE = 8 * 1024


def create_session() -> requests.Session:
    """Session shared by the HTTP strategies."""
    session = requests.Session()
    session.headers.update({'User-Agent': USER_AGENT})
    return session


class RetrievalStrategy(ABC):
    """One way of obtaining the rules document."""

    def __init__(self, name: str, timeout: float = FETCH_TIMEOUT):
        self.name = name
        self.timeout = timeout

    def describe(self, target: str) -> str:
        """Location actually read for target (used in logs and attempt records)."""
        return target

    @abstractmethod
    def fetch(self, target: str) -> str:
        """Return the document text or raise a SourceError."""


class LocalFileStrategy(RetrievalStrategy):
    """Reads a bundled copy of the document from disk."""

    def __init__(self, path: Path = LOCAL_RULES_PATH, name: str = "local", timeout: float = FETCH_TIMEOUT):
        super().__init__(name, timeout)
        self.path = Path(path)

    def describe(self, target: str) -> str:
        return str(self.path)

    def fetch(self, target: str) -> str:
        try:
            return self.path.read_text(encoding='utf-8-sig', errors='replace')
        except OSError as e:
            raise NetworkFailure(f"Local copy unavailable at {self.path}: {e}") from e


class HttpStrategy(RetrievalStrategy):
    """
    GETs a URL derived from the target, aborting once the timeout elapses.

    The body is streamed so the bound applies to the whole transfer, not just
    to the gap between two socket reads.
    """

    def __init__(self, name: str, timeout: float = FETCH_TIMEOUT, session: Optional[requests.Session] = None):
        super().__init__(name, timeout)
        self.session = session or create_session()

    def build_url(self, target: str) -> str:
        return target

    def describe(self, target: str) -> str:
        return self.build_url(target)

    def fetch(self, target: str) -> str:
        url = self.build_url(target)
        deadline = time.monotonic() + self.timeout
        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
        except requests.exceptions.Timeout as e:
            raise SourceTimeout(self.timeout) from e
        except requests.exceptions.RequestException as e:
            raise NetworkFailure(f"Request to {url} failed: {e}") from e

        try:
            if not 200 <= response.status_code < 300:
                raise HttpStatusError(response.status_code)

            chunks = []
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise SourceTimeout(self.timeout)
                if chunk:
                    chunks.append(chunk)
        except requests.exceptions.Timeout as e:
            raise SourceTimeout(self.timeout) from e
        except requests.exceptions.RequestException as e:
            raise NetworkFailure(f"Reading {url} failed: {e}") from e
        finally:
            response.close()

        return b"".join(chunks).decode(self._charset(response), errors='replace').lstrip('\ufeff')

    @staticmethod
    def _charset(response) -> str:
        """Declared charset, or utf-8 when it is missing or unknown to Python."""
        content_type = response.headers.get('content-type', '').lower()
        if 'charset=' not in content_type:
            return 'utf-8'
        charset = content_type.split('charset=', 1)[1].split(';', 1)[0].strip().strip('"\'')
        try:
            codecs.lookup(charset)
        except LookupError:
            logger.warning(f"Unknown charset {charset!r} declared by server, decoding as utf-8")
            return 'utf-8'
        return charset


class ProxyStrategy(HttpStrategy):
    """Fetches through a pass-through proxy; the template gets the encoded target as {url}."""

    def __init__(self, template: str, name: Optional[str] = None, timeout: float = FETCH_TIMEOUT,
                 session: Optional[requests.Session] = None):
        super().__init__(name or f"proxy:{template.split('/')[2]}", timeout, session)
        self.template = template

    def build_url(self, target: str) -> str:
        return self.template.format(url=quote(target, safe=''))


class DirectStrategy(HttpStrategy):
    """Plain GET of the canonical URL."""

    def __init__(self, name: str = "direct", timeout: float = FETCH_TIMEOUT, session: Optional[requests.Session] = None):
        super().__init__(name, timeout, session)


def build_default_strategies(local_path: Optional[Path] = LOCAL_RULES_PATH,
                             proxy_templates: Sequence[str] = PROXY_TEMPLATES,
                             timeout: float = FETCH_TIMEOUT,
                             include_direct: bool = True) -> List[RetrievalStrategy]:
    """
    Build the strategy list, most trusted and fastest first.

    Args:
        local_path: Bundled copy of the document, or None to skip it
        proxy_templates: Proxy URL templates in priority order
        timeout: Per-attempt time bound in seconds
        include_direct: Whether to finish with a direct fetch

    Returns:
        Ordered list of strategies
    """
    session = create_session()
    strategies: List[RetrievalStrategy] = []
    if local_path is not None:
        strategies.append(LocalFileStrategy(local_path, timeout=timeout))
    for template in proxy_templates:
        strategies.append(ProxyStrategy(template, timeout=timeout, session=session))
    if include_direct:
        strategies.append(DirectStrategy(timeout=timeout, session=session))
    return strategies


@dataclass
class ResolvedSource:
    """Accepted payload and how it was obtained."""
    text: str
    strategy: str
    attempts: List[SourceAttempt] = field(default_factory=list)


class SourceResolver:
    """
    Tries each strategy in order until one yields content the validator accepts.
    """

    def __init__(self, strategies: Sequence[RetrievalStrategy], validator: Optional[ContentValidator] = None):
        self.strategies = list(strategies)
        self.validator = validator or ContentValidator()

    def resolve(self, target: str) -> ResolvedSource:
        """
        Fetch target with the first strategy that works.

        Args:
            target: Canonical URL of the document

        Returns:
            ResolvedSource with the accepted text

        Raises:
            AllSourcesExhausted: every strategy failed or returned invalid content
        """
        attempts: List[SourceAttempt] = []
        last_error: Optional[str] = None

        for i, strategy in enumerate(self.strategies):
            location = strategy.describe(target)
            logger.info(f"[Sources] Strategy {i + 1}/{len(self.strategies)} '{strategy.name}': {location}")
            start = time.monotonic()
            try:
                text = strategy.fetch(target)
                self.validator.check(text)
            except Exception as e:
                elapsed = time.monotonic() - start
                if isinstance(e, (SourceError, ValidationFailure)):
                    reason = str(e)
                else:
                    # Anything else a strategy raises also counts as one failed attempt
                    reason = f"{type(e).__name__}: {e}"
                last_error = f"{strategy.name}: {reason}"
                attempts.append(SourceAttempt(strategy.name, location, False, reason, elapsed))
                logger.warning(f"Strategy '{strategy.name}' failed after {elapsed:.2f}s: {reason}")
                continue

            elapsed = time.monotonic() - start
            attempts.append(SourceAttempt(strategy.name, location, True, None, elapsed))
            logger.info(f"Strategy '{strategy.name}' succeeded: {len(text)} characters in {elapsed:.2f}s")
            return ResolvedSource(text=text, strategy=strategy.name, attempts=attempts)

        logger.error(f"All {len(self.strategies)} retrieval strategies failed")
        raise AllSourcesExhausted(last_error, attempts)
