"""
Tool handlers behind the MCP server.

Each handler takes the tool's named arguments and returns human-readable
text. Failures are raised as NightjarException subclasses; the server turns
them into error results.
"""

from typing import Dict, List, Optional

from launch_extraction.models import ParsedModel
from launch_extraction.variables import VARIABLE_FAMILIES, variable_family
from nightjar.session import NightjarSession
from nightjar.utils.errors import ToolInputError
from nightjar.utils.logging import get_logger

logger = get_logger(__name__)

NEXT_STEPS = (
    "You can now use other tools like analyze_rule, analyze_data_element, "
    "or analyze_variable to explore the implementation."
)


def _require(value: Optional[str], parameter: str) -> str:
    if not value:
        raise ToolInputError(parameter)
    return value


def format_parse_summary(model: ParsedModel, page_url: Optional[str] = None, embed_url: Optional[str] = None) -> str:
    header = "Successfully parsed Adobe Launch implementation"
    lines = [f"{header} from {page_url}!" if page_url else f"{header}!", ""]
    if embed_url:
        lines.append(f"Found embed code: {embed_url}")
    lines.extend(
        [
            f"Found {len(model.data_elements)} data elements",
            f"Found {len(model.rules)} rules",
            f"Detected variables: {', '.join(model.variables)}",
            "",
            NEXT_STEPS,
        ]
    )
    return "\n".join(lines)


def format_rule_list(names: List[str]) -> str:
    if not names:
        return "No rules found in the parsed embed code."
    return f"Found {len(names)} rules:\n\n" + "\n".join(names)


def format_data_element_list(names: List[str]) -> str:
    if not names:
        return "No data elements found in the parsed embed code."
    return f"Found {len(names)} data elements:\n\n" + "\n".join(names)


def format_variable_list(variables: Dict[str, List[str]]) -> str:
    if not variables:
        return "No variables found in the parsed embed code."

    groups: Dict[str, List[str]] = {family: [] for family, _ in VARIABLE_FAMILIES}
    others: List[str] = []
    for name in variables:
        groups.get(variable_family(name), others).append(name)

    labels = {"eVar": "eVars", "prop": "Props", "event": "Events"}
    lines = [f"Found {len(variables)} variables in the parsed embed code:", ""]
    for family, names in groups.items():
        lines.append(f"{labels[family]} ({len(names)}): {', '.join(names)}")
    if others:
        lines.append(f"Others ({len(others)}): {', '.join(others)}")
    return "\n".join(lines)


class NightjarTools:
    """One coroutine per tool, all sharing a single session."""

    def __init__(self, session: NightjarSession):
        self.session = session

    async def _parse_if_given(self, embed_code: Optional[str]) -> None:
        # Optional embed_code lets a caller parse and query in one call
        if embed_code:
            await self.session.parse_embed(embed_code)
        else:
            self.session.require_model()

    def _use_ai(self, use_ai: Optional[bool]) -> bool:
        return use_ai is True and self.session.ai_available

    async def parse_embed_code(self, embed_code: Optional[str]) -> str:
        embed_code = _require(embed_code, "embed_code")
        model = await self.session.parse_embed(embed_code)
        return format_parse_summary(model)

    async def parse_embed_from_url(self, url: Optional[str]) -> str:
        url = _require(url, "url")
        embed_url, model = await self.session.parse_embed_from_page(url)
        return format_parse_summary(model, page_url=url, embed_url=embed_url)

    async def analyze_rule(
        self, rule_name: Optional[str], embed_code: Optional[str] = None, use_ai: Optional[bool] = None
    ) -> str:
        rule_name = _require(rule_name, "rule_name")
        await self._parse_if_given(embed_code)
        logger.debug(f"Analyzing rule: {rule_name}")
        return await self.session.analyze_rule(rule_name, use_ai=self._use_ai(use_ai))

    async def analyze_data_element(
        self, element_name: Optional[str], embed_code: Optional[str] = None, use_ai: Optional[bool] = None
    ) -> str:
        element_name = _require(element_name, "element_name")
        await self._parse_if_given(embed_code)
        logger.debug(f"Analyzing data element: {element_name}")
        return await self.session.analyze_data_element(element_name, use_ai=self._use_ai(use_ai))

    async def analyze_variable(
        self, variable_name: Optional[str], embed_code: Optional[str] = None, use_ai: Optional[bool] = None
    ) -> str:
        variable_name = _require(variable_name, "variable_name")
        await self._parse_if_given(embed_code)
        logger.debug(f"Analyzing variable: {variable_name}")
        return await self.session.analyze_variable(variable_name, use_ai=self._use_ai(use_ai))

    async def list_rules(self, embed_code: Optional[str] = None) -> str:
        await self._parse_if_given(embed_code)
        return format_rule_list(self.session.list_rules())

    async def list_data_elements(self, embed_code: Optional[str] = None) -> str:
        await self._parse_if_given(embed_code)
        return format_data_element_list(self.session.list_data_elements())

    async def list_variables(self, embed_code: Optional[str] = None) -> str:
        await self._parse_if_given(embed_code)
        return format_variable_list(self.session.list_variables())
