import copy
from typing import Any, Dict

import pytest

from jaops import Application
from jaops.config import get_config
from dummy import ARTICLES, STORE, USERS, Article, ArticleProcessor, Comment, User, UserProcessor


@pytest.fixture(autouse=True)
def config_cache():
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture(autouse=True)
def store() -> Dict[str, Dict[str, Dict[str, Any]]]:
    STORE["users"] = copy.deepcopy(USERS)
    STORE["articles"] = copy.deepcopy(ARTICLES)
    return STORE


@pytest.fixture
def app() -> Application:
    return Application(resources=[User, Article, Comment], processors=[UserProcessor, ArticleProcessor])


@pytest.fixture
def api_app() -> Application:
    return Application(namespace="api", resources=[User, Article, Comment], processors=[UserProcessor, ArticleProcessor])

