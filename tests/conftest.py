"""
Shared fixtures: synthetic minified Launch libraries and a fake fetcher.
"""

from typing import Dict, List, Optional, Union

import pytest

from nightjar.fetcher import BaseFetcher
from nightjar.session import NightjarSession
from nightjar.utils.errors import NetworkError

EMBED_URL = "https://assets.adobedtm.com/abc123/def456/launch-ENtest.min.js"
REMOTE_CODE_URL = "https://assets.adobedtm.com/abc123/def456/RC789source.min.js"
REMOTE_CODE = "s.eVar7='remote';s.t();"

DATA_ELEMENTS = (
    'dataElements:{'
    '"Page Name":{modulePath:"core/src/lib/dataElements/javascriptVariable.js",'
    'settings:{path:"digitalData.page.name"}},'
    '"Visitor Type":{storageDuration:"visitor",modulePath:"core/src/lib/dataElements/localStorage.js",'
    'settings:{name:"vt"}},'
    '"User ID":{modulePath:"core/src/lib/dataElements/cookie.js",'
    'settings:{cookieName:"uid"}}'
    '},extensions:{core:{displayName:"Core"}},'
)

RULE_PAGE_LOAD = (
    '{id:"RL1",name:"PageLoad",'
    'events:[{modulePath:"core/src/lib/events/pageLoad.js",settings:{}}],'
    'conditions:[{modulePath:"core/src/lib/conditions/path.js",settings:{type:"pathname",value:"/home"}}],'
    'actions:[{modulePath:"adobe-analytics/src/lib/actions/setVariables.js",'
    'settings:{trackerProperties:{eVar5:"%Page Name%",prop2:"home",events:"event10"}}}],'
    'ruleOrder:50}'
)

RULE_LINK_CLICK = (
    '{id:"RL2",name:"Link Click",'
    'events:[{modulePath:"core/src/lib/events/click.js",settings:{elementSelector:"a.cta"}}],'
    'conditions:[{modulePath:"core/src/lib/conditions/domain.js",settings:{hostname:"example.com"}}],'
    'actions:[{modulePath:"core/src/lib/actions/customCode.js",'
    'settings:{source:"s.eVar5=\'cta\';s.events=\'event12\';s.tl(this,\'o\',\'CTA\');",language:"javascript"}}],'
    'ruleOrder:50}'
)

RULE_REMOTE_CODE = (
    '{id:"RL3",name:"Remote Code",'
    'events:[{modulePath:"core/src/lib/events/domReady.js",settings:{}}],'
    'actions:[{modulePath:"core/src/lib/actions/customCode.js",'
    f'settings:{{source:"{REMOTE_CODE_URL}",isExternal:!0}}}}],'
    'ruleOrder:50}'
)


def build_bundle(rules: List[str], data_elements: str = DATA_ELEMENTS) -> str:
    """Assemble a minified library around the given rule records."""
    return (
        "(function(){window._satellite=window._satellite||{};"
        'window._satellite.container={buildInfo:{turbineVersion:"27.5.0"},'
        + data_elements
        + "rules:["
        + ",".join(rules)
        + '],property:{name:"Demo Property"}};'
        "var _satellite=function(){return window._satellite}();})();"
    )


BUNDLE = build_bundle([RULE_PAGE_LOAD, RULE_LINK_CLICK, RULE_REMOTE_CODE])

SINGLE_RULE_BUNDLE = (
    'window._satellite.container={rules:[{id:"RL1",name:"PageLoad",'
    'events:[{modulePath:"core/src/lib/events/pageLoad.js"}]}]};'
)


class FakeFetcher(BaseFetcher):
    """In-memory fetcher that records every requested URL."""

    def __init__(self, responses: Optional[Dict[str, Union[str, Exception]]] = None):
        self.responses = dict(responses or {})
        self.calls: List[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        response = self.responses.get(url)
        if response is None:
            raise NetworkError(url, "HTTP 404 Not Found")
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def bundle_text():
    """Three rules, three data elements."""
    return BUNDLE


@pytest.fixture
def fetcher():
    """Fetcher serving the demo library and its remote custom code."""
    return FakeFetcher({EMBED_URL: BUNDLE, REMOTE_CODE_URL: REMOTE_CODE})


@pytest.fixture
def session(fetcher):
    """Session without a generative backend."""
    return NightjarSession(fetcher=fetcher)


@pytest.fixture
async def parsed_session(session):
    """Session with the demo library already parsed."""
    await session.parse_embed(EMBED_URL)
    return session
