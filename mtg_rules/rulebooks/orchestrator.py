"""
Rules loading orchestrator using LangGraph to coordinate the overall flow.

cache check -> fetch strategies -> validate -> parse -> merge -> cache write,
laid out as a small graph so the order of operations and the two terminal
failures (sources exhausted, empty parse) stay explicit.
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional, Sequence, TypedDict

from langgraph.graph import StateGraph, END

from ..cache import CacheStore
from ..config import RULES_URL, RULES_VERSION
from ..error_handling import AllSourcesExhausted, EmptyParseResult, RulesError
from ..models import LoadResult, RuleEntry, SourceAttempt
from .handlers import ContentValidator, RuleParser, SourceResolver, build_default_strategies
from .handlers.sources import RetrievalStrategy
from .repository import MANUAL_RULES, merge


logger = logging.getLogger(__name__)


class LoadState(TypedDict, total=False):
    use_cache: bool
    text: Optional[str]
    source: Optional[str]
    from_cache: bool
    attempts: List[SourceAttempt]
    entries: List[RuleEntry]
    error: Optional[RulesError]


class RulesOrchestrator:
    """Fetch-and-parse cycle for the keyword rules, driven by LangGraph."""

    def __init__(self,
                 strategies: Optional[Sequence[RetrievalStrategy]] = None,
                 cache: Optional[CacheStore] = None,
                 validator: Optional[ContentValidator] = None,
                 parser: Optional[RuleParser] = None,
                 manual_rules: Sequence[RuleEntry] = MANUAL_RULES,
                 target_url: str = RULES_URL,
                 version: str = RULES_VERSION):
        self.validator = validator or ContentValidator()
        self.resolver = SourceResolver(
            strategies if strategies is not None else build_default_strategies(),
            self.validator,
        )
        self.cache = cache if cache is not None else CacheStore(validator=self.validator)
        self.parser = parser or RuleParser()
        self.manual_rules = list(manual_rules)
        self.target_url = target_url
        self.version = version
        self.graph = self._build_graph()

    def _build_graph(self):
        graph = StateGraph(LoadState)

        def check_cache(state: LoadState) -> LoadState:
            if not state.get("use_cache", True):
                logger.info("[Rules] Cache bypassed for this cycle")
                return {"from_cache": False}
            text = self.cache.get(self.version)
            if text is None:
                return {"from_cache": False}
            return {"text": text, "source": "cache", "from_cache": True}

        def fetch_sources(state: LoadState) -> LoadState:
            try:
                resolved = self.resolver.resolve(self.target_url)
            except AllSourcesExhausted as e:
                return {"error": e, "attempts": e.attempts}
            return {"text": resolved.text, "source": resolved.strategy, "attempts": resolved.attempts}

        def parse_and_store(state: LoadState) -> LoadState:
            parsed = self.parser.parse(state["text"])
            if not parsed:
                logger.error(f"[Rules] Text from '{state.get('source')}' produced no entries")
                return {"error": EmptyParseResult(state.get("source"))}
            entries = merge(parsed, self.manual_rules)
            if not state.get("from_cache"):
                outcome = self.cache.put(state["text"], self.version)
                if not outcome.ok:
                    logger.warning(f"[Rules] Continuing without cache: {outcome.error}")
            return {"entries": entries}

        def after_cache(state: LoadState) -> str:
            return "hit" if state.get("text") else "miss"

        def after_fetch(state: LoadState) -> str:
            return "failed" if state.get("error") else "fetched"

        graph.add_node("check_cache", check_cache)
        graph.add_node("fetch_sources", fetch_sources)
        graph.add_node("parse_and_store", parse_and_store)

        graph.add_conditional_edges("check_cache", after_cache, {"hit": "parse_and_store", "miss": "fetch_sources"})
        graph.add_conditional_edges("fetch_sources", after_fetch, {"fetched": "parse_and_store", "failed": END})
        graph.add_edge("parse_and_store", END)

        graph.set_entry_point("check_cache")
        return graph.compile()

    def _invoke(self, use_cache: bool) -> LoadState:
        state: LoadState = {
            "use_cache": use_cache,
            "text": None,
            "source": None,
            "from_cache": False,
            "attempts": [],
            "entries": [],
            "error": None,
        }
        return self.graph.invoke(state)

    def load(self, use_cache: bool = True) -> List[RuleEntry]:
        """
        Run one cycle and return the merged entries.

        Raises:
            AllSourcesExhausted: no strategy produced valid text
            EmptyParseResult: the text parsed into nothing
        """
        final = self._invoke(use_cache)
        error = final.get("error")
        if error is not None:
            raise error
        return final["entries"]

    def run(self, use_cache: bool = True) -> LoadResult:
        """Run one cycle and report the outcome instead of raising."""
        start = time.time()
        final = self._invoke(use_cache)
        elapsed = time.time() - start
        error = final.get("error")
        if error is not None:
            logger.error(f"[Rules] Load failed: {error}")
            return LoadResult(
                success=False,
                source=final.get("source"),
                error_message=str(error),
                error_kind=type(error).__name__,
                processing_time=elapsed,
            )
        entries = final["entries"]
        logger.info(f"[Rules] Loaded {len(entries)} entries from '{final.get('source')}' in {elapsed:.2f}s")
        return LoadResult(
            success=True,
            entries=entries,
            source=final.get("source"),
            from_cache=bool(final.get("from_cache")),
            processing_time=elapsed,
        )
