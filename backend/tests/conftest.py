import pytest

from app.config import get_settings
from app.services.deployment import get_deploy_panel, get_deployment_actor


@pytest.fixture(autouse=True)
def clear_cached_singletons():
    """Give every test a fresh settings object, actor and panel."""
    get_settings.cache_clear()
    get_deployment_actor.cache_clear()
    get_deploy_panel.cache_clear()
    yield
    get_settings.cache_clear()
    get_deployment_actor.cache_clear()
    get_deploy_panel.cache_clear()
