"""
Analysis session - the query layer over one parsed Launch library.

A session holds at most one current ParsedModel. Parsing replaces it
wholesale; the only in-place change is resolving a rule's remote custom
code the first time that rule is analyzed.
"""

import asyncio
import re
from typing import Dict, List, Optional, Tuple
from urllib.parse import urljoin

from launch_extraction.fields import classify_data_element
from launch_extraction.models import ParsedModel, RawBundle, remote_code_url
from launch_extraction.pipeline import LaunchParser
from launch_extraction.strategies import RecordExtractionStrategy, get_strategy
from launch_extraction.summaries import (
    render_data_element_report,
    render_rule_report,
    render_variable_report,
    variable_usage_details,
)
from launch_extraction.variables import variable_family
from nightjar.config import Settings
from nightjar.fetcher import BaseFetcher, HttpFetcher
from nightjar.generator import AnalysisGenerator, create_generator
from nightjar.prompts import DATA_ELEMENT_ANALYSIS_PROMPT, RULE_ANALYSIS_PROMPT, VARIABLE_ANALYSIS_PROMPT
from nightjar.utils.errors import (
    DataElementNotFoundError,
    EmbedNotFoundError,
    NetworkError,
    NoModelParsedError,
    RuleNotFoundError,
    VariableNotFoundError,
)
from nightjar.utils.logging import LogContext, get_logger, log_performance

logger = get_logger(__name__)

# Tried in order; the first match wins
EMBED_SCRIPT_PATTERNS = [
    re.compile(r"""<script[^>]*?\ssrc=["'](https://assets\.adobedtm\.com/[^"']+)["'][^>]*>\s*</script>""", re.IGNORECASE),
    re.compile(r"""<script[^>]*?\ssrc=["']([^"']+launch[^"']+)["'][^>]*>\s*</script>""", re.IGNORECASE),
]


class NightjarSession:
    """
    Parse a Launch library and answer questions about it.

    Collaborators are passed in explicitly; the generator is optional and
    its absence only disables the AI path.
    """

    def __init__(
        self,
        fetcher: BaseFetcher,
        generator: Optional[AnalysisGenerator] = None,
        strategy: Optional[RecordExtractionStrategy] = None,
    ) -> None:
        self.fetcher = fetcher
        self.generator = generator
        self.parser = LaunchParser(strategy)
        self.model: Optional[ParsedModel] = None
        # Single writer: model replacement and custom code patches
        self._lock = asyncio.Lock()
        # Rule index -> in-flight remote code fetch for the current model
        self._pending_code: Dict[int, asyncio.Task] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "NightjarSession":
        """Build a session with the HTTP fetcher and, if configured, the OpenAI generator."""
        strategy = get_strategy(
            settings.extraction_strategy,
            **(
                {"window_chars": settings.rule_window_chars, "window_lead": settings.rule_window_lead}
                if settings.extraction_strategy == "anchor"
                else {}
            ),
        )
        return cls(
            fetcher=HttpFetcher(timeout=settings.http_timeout, user_agent=settings.user_agent),
            generator=create_generator(settings),
            strategy=strategy,
        )

    @property
    def ai_available(self) -> bool:
        return self.generator is not None

    def require_model(self) -> ParsedModel:
        if self.model is None:
            raise NoModelParsedError()
        return self.model

    # =========================================================================
    # Parsing
    # =========================================================================

    @log_performance
    async def parse_embed(self, embed_url: str) -> ParsedModel:
        """
        Fetch and parse a Launch library, replacing the current model.

        Args:
            embed_url: Launch library URL

        Returns:
            The new current model

        Raises:
            NetworkError: If the library cannot be fetched
            InvalidBundleFormatError: If the text is not a Launch library
            ContainerNotFoundError: If the container assignment is missing
        """
        logger.info(f"Parsing embed code: {embed_url}")
        text = await self.fetcher.fetch(embed_url)
        return await self._install(RawBundle(text=text, source_url=embed_url))

    async def parse_bundle_text(self, text: str, source_url: Optional[str] = None) -> ParsedModel:
        """Parse library text that was obtained elsewhere."""
        return await self._install(RawBundle(text=text, source_url=source_url))

    async def _install(self, bundle: RawBundle) -> ParsedModel:
        # Parse first so that a failure leaves the previous model in place
        model = self.parser.parse(bundle)
        async with self._lock:
            self.model = model
            self._pending_code = {}
        return model

    async def extract_embed_from_url(self, page_url: str) -> str:
        """
        Find the Launch library referenced by an HTML page.

        Args:
            page_url: Page to inspect

        Returns:
            Absolute URL of the library script

        Raises:
            NetworkError: If the page cannot be fetched
            EmbedNotFoundError: If no known script tag is present
        """
        logger.info(f"Extracting embed code from URL: {page_url}")
        html = await self.fetcher.fetch(page_url)

        for pattern in EMBED_SCRIPT_PATTERNS:
            match = pattern.search(html)
            if match:
                embed_url = urljoin(page_url, match.group(1))
                logger.info(f"Found embed code: {embed_url}")
                return embed_url

        raise EmbedNotFoundError(page_url)

    async def parse_embed_from_page(self, page_url: str) -> Tuple[str, ParsedModel]:
        embed_url = await self.extract_embed_from_url(page_url)
        model = await self.parse_embed(embed_url)
        return embed_url, model

    # =========================================================================
    # Analysis
    # =========================================================================

    async def analyze_rule(self, rule_name: str, use_ai: bool = False) -> str:
        """
        Analyze one rule by exact name (first match when names repeat).

        Remote custom code is fetched on the first analysis of the rule and
        cached in the model.

        Raises:
            NoModelParsedError: If nothing has been parsed
            RuleNotFoundError: If no rule has this name
            BackendError: If the AI path was taken and failed
        """
        model = self.require_model()
        index = model.rules.index_of(rule_name)
        if index == -1:
            raise RuleNotFoundError(rule_name)

        with LogContext(rule=rule_name):
            await self._resolve_custom_code(model, index)
            record = model.rules.record(index)

            if use_ai and self.generator:
                return await self.generator.analyze(
                    record.model_dump(),
                    RULE_ANALYSIS_PROMPT.format(name=rule_name),
                )
            return render_rule_report(record)

    async def _resolve_custom_code(self, model: ParsedModel, index: int) -> None:
        # Callers overlapping on the same rule share one fetch
        async with self._lock:
            if self.model is not model:
                return
            task = self._pending_code.get(index)
            if task is None:
                url = remote_code_url(model.rules.custom_code[index])
                if url is None:
                    return
                task = asyncio.ensure_future(self._fetch_custom_code(model, index, url))
                self._pending_code[index] = task

        await asyncio.shield(task)

    async def _fetch_custom_code(self, model: ParsedModel, index: int, url: str) -> None:
        logger.info(f"Fetching remote custom code from {url}")
        code = None
        try:
            code = await self.fetcher.fetch(url)
        except NetworkError as e:
            logger.warning(f"Could not fetch custom code: {e.reason}")
            code = f"{model.rules.custom_code[index]}\n// Could not fetch custom code from {url}: {e.reason}"
        finally:
            async with self._lock:
                if self._pending_code.get(index) is asyncio.current_task():
                    del self._pending_code[index]
                if code is not None:
                    if self.model is model:
                        model.rules.replace_custom_code(index, code)
                    else:
                        logger.debug("Model changed while fetching custom code; dropping result")

    async def analyze_data_element(self, element_name: str, use_ai: bool = False) -> str:
        """
        Analyze one data element.

        Raises:
            NoModelParsedError: If nothing has been parsed
            DataElementNotFoundError: If no element has this name
            BackendError: If the AI path was taken and failed
        """
        model = self.require_model()
        record_text = model.data_elements.get(element_name)
        if record_text is None:
            raise DataElementNotFoundError(element_name)

        element_type = classify_data_element(record_text)

        if use_ai and self.generator:
            return await self.generator.analyze(
                {"name": element_name, "raw": record_text, "type": element_type},
                DATA_ELEMENT_ANALYSIS_PROMPT.format(name=element_name),
            )
        return render_data_element_report(element_name, element_type, record_text)

    async def analyze_variable(self, variable_name: str, use_ai: bool = False) -> str:
        """
        Describe where an analytics variable is set.

        Raises:
            NoModelParsedError: If nothing has been parsed
            VariableNotFoundError: If no rule references the variable
            BackendError: If the AI path was taken and failed
        """
        model = self.require_model()
        used_in_rules = model.variables.get(variable_name)
        if used_in_rules is None:
            raise VariableNotFoundError(variable_name)

        details = variable_usage_details(model, variable_name)

        if use_ai and self.generator:
            return await self.generator.analyze(
                {
                    "name": variable_name,
                    "usedInRules": used_in_rules,
                    "usageDetails": details,
                    "variableType": variable_family(variable_name),
                },
                VARIABLE_ANALYSIS_PROMPT.format(name=variable_name),
            )
        return render_variable_report(variable_name, used_in_rules, details)

    # =========================================================================
    # Listing
    # =========================================================================

    def list_rules(self) -> List[str]:
        return list(self.require_model().rules.names)

    def list_data_elements(self) -> List[str]:
        return list(self.require_model().data_elements)

    def list_variables(self) -> Dict[str, List[str]]:
        return {name: list(rules) for name, rules in self.require_model().variables.items()}
