import pytest

from sitemapfrog import create_config
from sitemapfrog.core.config import CrawlConfig, ProfileConfig, create_config_from_profile
from sitemapfrog.core.exceptions import ConfigException


def test_defaults():
    config = CrawlConfig()
    assert config.domain == 'https://fixup.ge'
    assert config.max_urls == 2000
    assert config.min_urls_target == 100
    assert config.max_depth == 4
    assert config.concurrent_requests == 5
    assert config.max_redirects == 10
    assert config.sitemap_url == 'https://fixup.ge/sitemap.xml'


@pytest.mark.parametrize('overrides', [
    {'domain': 'fixup.ge'},
    {'domain': 'https://fixup.ge/'},
    {'max_urls': 0},
    {'max_depth': -1},
    {'timeout': 0},
    {'concurrent_requests': 0},
    {'min_urls_target': -5},
])
def test_invalid_values(overrides):
    with pytest.raises(ConfigException):
        CrawlConfig(**overrides)


def test_config_is_immutable():
    config = CrawlConfig()
    with pytest.raises(AttributeError):
        config.max_urls = 10


def test_replace_and_unknown_field():
    config = CrawlConfig().replace(max_urls=10)
    assert config.max_urls == 10
    assert config.to_dict()['max_urls'] == 10

    with pytest.raises(ConfigException):
        CrawlConfig().replace(not_a_field=1)


def test_profiles():
    assert ProfileConfig.list_profiles() == ['standard', 'quick']
    assert ProfileConfig.get_profile('QUICK').config.max_urls == 50
    assert ProfileConfig.get_profile('missing') is None


def test_create_config_from_profile_ignores_none():
    config = create_config_from_profile('quick', max_urls=None, max_depth=3)
    assert config.max_urls == 50
    assert config.max_depth == 3

    with pytest.raises(ConfigException):
        create_config_from_profile('enterprise')


def test_package_level_factory():
    assert create_config('quick', timeout=3).timeout == 3
