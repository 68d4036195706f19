import pytest

from visual_regression.recon.targeting import OriginFilter  # type: ignore[import]
from visual_regression.recon.urls import InvalidUrlError  # type: ignore[import]


def test_origin_filter_accepts_same_origin():
    origin = OriginFilter.from_url("http://x.test/")

    assert origin.is_allowed("http://x.test/about")
    assert origin.is_allowed("http://X.TEST:80/contact?x=1")


@pytest.mark.parametrize(
    "url",
    [
        "https://x.test/about",
        "http://other.test/",
        "http://x.test:8080/",
        "http://sub.x.test/",
        "mailto:team@x.test",
        "not a url",
    ],
)
def test_origin_filter_rejects_other_origins(url):
    origin = OriginFilter.from_url("http://x.test/")

    assert not origin.is_allowed(url)


def test_origin_filter_requires_http_seed():
    with pytest.raises(InvalidUrlError):
        OriginFilter.from_url("ftp://x.test/")
