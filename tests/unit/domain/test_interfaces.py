import pytest

from grindcli.domain.interfaces.cache import CacheService
from grindcli.domain.interfaces.user_interface import UserInterface


class CacheWithoutClear(CacheService):
    async def get(self, namespace, identifier, accept_expired=False):
        return None

    async def set(self, namespace, identifier, data, ttl=None):
        pass

    async def invalidate(self, namespace, identifier=None):
        pass

    async def cleanup(self):
        return 0

    def get_cache_status(self, namespace=None):
        return None


class DisplayWithoutPrompt(UserInterface):
    def display_error(self, message):
        pass

    def display_warning(self, message):
        pass

    def display_info(self, message):
        pass

    def display_success(self, message):
        pass

    def display_cache_status(self, report):
        pass


def test_cache_service_requires_clear():
    with pytest.raises(TypeError):
        CacheWithoutClear()

def test_user_interface_requires_yes_no_prompt():
    with pytest.raises(TypeError):
        DisplayWithoutPrompt()
