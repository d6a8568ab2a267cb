"""
Unit tests for src/search/ddgs.py
"""

import asyncio
import json

import pytest

from src.search.ddgs import (
    ANSWERS_URL,
    BASE_URL,
    IMAGES_URL,
    NEWS_URL,
    SUGGESTIONS_URL,
    TEXT_API_URL,
    TEXT_HTML_URL,
    TEXT_LITE_URL,
    TRANSLATE_URL,
    VIDEOS_URL,
    AsyncDDGS,
)
from src.search.exceptions import (
    ExtractionFailed,
    InvalidBackend,
    MissingKeywords,
    TokenNotFound,
    TransportError,
)
from tests.fixtures.pages import FakeFetcher, api_body, api_rows, json_body

# Import fixtures from fixtures folder
pytest_plugins = ["tests.fixtures.pages"]


def run(coro):
    return asyncio.run(coro)


def offset(params: dict) -> int:
    return int(params.get("s", 0))


# ============================================================
# text() tests
# ============================================================


class TestText:
    """Tests for AsyncDDGS.text."""

    def test_api_backend(self, seed_html):
        fetcher = FakeFetcher(
            {
                BASE_URL: seed_html,
                TEXT_API_URL: api_body(api_rows("go", 15)),
            }
        )
        results = run(AsyncDDGS(fetcher=fetcher).text("golang", max_results=10))

        assert 0 < len(results) <= 10
        assert all(r["href"] for r in results)
        assert all("<" not in r["body"] for r in results)
        assert results[0] == {
            "title": "go result 0",
            "href": "https://go.example.com/0",
            "body": "Snippet & text 0",
        }

    def test_api_payload(self, seed_html):
        fetcher = FakeFetcher({BASE_URL: seed_html, TEXT_API_URL: api_body([])})
        run(
            AsyncDDGS(fetcher=fetcher).text(
                "golang", region="US-EN", safesearch="off", timelimit="w"
            )
        )

        params = fetcher.calls_to(TEXT_API_URL)[0]
        assert params["vqd"] == "4-123456789012345678901234567890"
        assert params["kl"] == "us-en"
        assert params["ex"] == "-2"
        assert params["df"] == "w"
        assert params["s"] == "0"

    def test_api_strict_safesearch(self, seed_html):
        fetcher = FakeFetcher({BASE_URL: seed_html, TEXT_API_URL: api_body([])})
        run(AsyncDDGS(fetcher=fetcher).text("golang", safesearch="on"))

        params = fetcher.calls_to(TEXT_API_URL)[0]
        assert params["p"] == "1"
        assert "ex" not in params

    def test_api_skips_self_link_and_empty_body(self, seed_html):
        rows = [
            {"u": "http://www.google.com/search?q=golang", "t": "g", "a": "redirect"},
            {"u": "https://empty.example.com", "t": "empty", "a": ""},
            {"u": "https://go.dev", "t": "Go", "a": "The Go language"},
        ]
        fetcher = FakeFetcher({BASE_URL: seed_html, TEXT_API_URL: api_body(rows)})
        results = run(AsyncDDGS(fetcher=fetcher).text("golang"))

        assert [r["href"] for r in results] == ["https://go.dev"]

    def test_api_fans_out_and_dedups(self, seed_html):
        pages = {
            0: api_body(api_rows("a", 20)),
            23: api_body(api_rows("a", 10, start=15) + api_rows("b", 10)),
        }
        fetcher = FakeFetcher(
            {
                BASE_URL: seed_html,
                TEXT_API_URL: lambda params, data: pages.get(offset(params), api_body([])),
            }
        )
        results = run(AsyncDDGS(fetcher=fetcher).text("golang", max_results=40))
        hrefs = [r["href"] for r in results]

        assert len(hrefs) == len(set(hrefs))
        assert hrefs[:25] == [f"https://a.example.com/{i}" for i in range(25)]
        assert hrefs[25:] == [f"https://b.example.com/{i}" for i in range(10)]

    def test_missing_keywords_issues_no_request(self):
        fetcher = FakeFetcher({})
        with pytest.raises(MissingKeywords):
            run(AsyncDDGS(fetcher=fetcher).text(""))

        assert fetcher.calls == []

    def test_invalid_backend(self):
        fetcher = FakeFetcher({})
        with pytest.raises(InvalidBackend) as exc_info:
            run(AsyncDDGS(fetcher=fetcher).text("golang", backend="bing"))

        assert exc_info.value.backend == "bing"
        assert fetcher.calls == []

    def test_token_not_found(self):
        fetcher = FakeFetcher({BASE_URL: b"<html>no token here</html>"})
        with pytest.raises(TokenNotFound):
            run(AsyncDDGS(fetcher=fetcher).text("golang"))

        assert fetcher.calls_to(TEXT_API_URL) == []

    def test_seed_transport_error_propagates(self):
        fetcher = FakeFetcher({BASE_URL: TransportError("HTTP 403")})
        with pytest.raises(TransportError):
            run(AsyncDDGS(fetcher=fetcher).text("golang"))

    def test_html_backend(self, html_blocks_body):
        fetcher = FakeFetcher({TEXT_HTML_URL: html_blocks_body})
        results = run(AsyncDDGS(fetcher=fetcher).text("go", backend="html"))

        assert [r["href"] for r in results] == [
            "https://go.dev/",
            "https://www.rust-lang.org/",
        ]
        assert results[0]["title"] == "The Go Programming Language"
        assert results[0]["body"] == "Go is an open source language & more"
        # First page needs no token
        assert fetcher.calls_to(BASE_URL) == []
        assert fetcher.calls[0][0] == "POST"

    def test_html_backend_token_past_first_page(self, seed_html, html_blocks_body):
        fetcher = FakeFetcher({BASE_URL: seed_html, TEXT_HTML_URL: html_blocks_body})
        run(AsyncDDGS(fetcher=fetcher).text("go", backend="html", max_results=30))

        calls = fetcher.calls_to(TEXT_HTML_URL)
        assert len(fetcher.calls_to(BASE_URL)) == 1
        assert sorted(int(c["s"]) for c in calls) == [0, 23]
        assert all(c["vqd"] == "4-123456789012345678901234567890" for c in calls)

    def test_lite_backend(self, html_table_body):
        fetcher = FakeFetcher({TEXT_LITE_URL: html_table_body})
        results = run(AsyncDDGS(fetcher=fetcher).text("go", backend="lite"))

        assert results == [
            {
                "title": "The Go Programming Language",
                "href": "https://go.dev/",
                "body": "Go is expressive & concise",
            },
            {
                "title": "Learn Rust",
                "href": "https://www.rust-lang.org/learn",
                "body": "Get started with Rust",
            },
        ]

    def test_lite_no_more_results(self, html_table_body):
        pages = {0: html_table_body, 23: b"<html><table></table>No more results.</html>"}
        fetcher = FakeFetcher(
            {TEXT_LITE_URL: lambda params, data: pages[offset(params)]}
        )
        results = run(
            AsyncDDGS(fetcher=fetcher).text("go", backend="lite", max_results=30)
        )

        assert len(results) == 2


# ============================================================
# images() / videos() / news() tests
# ============================================================


class TestImages:
    """Tests for AsyncDDGS.images."""

    def test_maps_and_dedups(self, seed_html, image_rows):
        fetcher = FakeFetcher({BASE_URL: seed_html, IMAGES_URL: json_body(image_rows)})
        results = run(AsyncDDGS(fetcher=fetcher).images("cat", max_results=200))

        assert sorted(int(c["s"]) for c in fetcher.calls_to(IMAGES_URL)) == [0, 100]
        assert results == [
            {
                "title": "Cat & dog",
                "image": "https://img.example.com/cat 1.jpg",
                "thumbnail": "https://tse.example.com/th?id=1",
                "url": "https://example.com/cats",
                "height": "800",
                "width": "1200",
                "source": "Bing",
            }
        ]

    def test_filters(self, seed_html):
        fetcher = FakeFetcher({BASE_URL: seed_html, IMAGES_URL: json_body([])})
        run(
            AsyncDDGS(fetcher=fetcher).images(
                "cat",
                safesearch="off",
                timelimit="Day",
                size="Large",
                layout="Wide",
            )
        )

        params = fetcher.calls_to(IMAGES_URL)[0]
        assert params["f"] == "time:Day,size:Large,layout:Wide"
        assert params["p"] == "-1"
        assert params["o"] == "json"

    def test_no_filters(self, seed_html):
        fetcher = FakeFetcher({BASE_URL: seed_html, IMAGES_URL: json_body([])})
        run(AsyncDDGS(fetcher=fetcher).images("cat"))

        assert "f" not in fetcher.calls_to(IMAGES_URL)[0]

    def test_missing_keywords(self):
        with pytest.raises(MissingKeywords):
            run(AsyncDDGS(fetcher=FakeFetcher({})).images(""))


class TestVideos:
    """Tests for AsyncDDGS.videos."""

    def test_unique_by_content(self, seed_html):
        rows = [
            {"content": "https://youtube.com/watch?v=1", "title": "One"},
            {"content": "https://youtube.com/watch?v=2", "title": "Two"},
            {"content": "https://youtube.com/watch?v=1", "title": "One again"},
            {"title": "No content"},
        ]
        fetcher = FakeFetcher({BASE_URL: seed_html, VIDEOS_URL: json_body(rows)})
        results = run(AsyncDDGS(fetcher=fetcher).videos("go", max_results=100))

        assert [r["title"] for r in results] == ["One", "Two"]

    def test_filters(self, seed_html):
        fetcher = FakeFetcher({BASE_URL: seed_html, VIDEOS_URL: json_body([])})
        run(
            AsyncDDGS(fetcher=fetcher).videos(
                "go", safesearch="off", timelimit="w", duration="short"
            )
        )

        params = fetcher.calls_to(VIDEOS_URL)[0]
        assert params["f"] == "publishedAfter:w,videoDuration:short"
        assert params["p"] == "-2"


class TestNews:
    """Tests for AsyncDDGS.news."""

    def test_maps_and_dedups(self, seed_html, news_rows):
        fetcher = FakeFetcher({BASE_URL: seed_html, NEWS_URL: json_body(news_rows)})
        results = run(AsyncDDGS(fetcher=fetcher).news("go", timelimit="d"))

        assert results == [
            {
                "date": "2023-11-14T22:13:20+00:00",
                "title": "Go 1.22 released",
                "body": 'The Go team announced "1.22"',
                "url": "https://news.example.com/go-122",
                "image": "https://news.example.com/img.png",
                "source": "Example News",
            }
        ]
        params = fetcher.calls_to(NEWS_URL)[0]
        assert params["noamp"] == "1"
        assert params["df"] == "d"

    def test_failed_page_keeps_other_pages(self, seed_html, news_rows):
        pages = {0: json_body(news_rows[:1]), 59: b"not json"}
        fetcher = FakeFetcher(
            {
                BASE_URL: seed_html,
                NEWS_URL: lambda params, data: pages[offset(params)],
            }
        )
        results = run(AsyncDDGS(fetcher=fetcher).news("go", max_results=60))

        assert [r["url"] for r in results] == ["https://news.example.com/go-122"]


# ============================================================
# answers() / suggestions() / translate() tests
# ============================================================


class TestAnswers:
    """Tests for AsyncDDGS.answers."""

    def test_abstract_and_related_topics(self):
        def handler(params, data):
            if params["q"].startswith("what is "):
                return json.dumps(
                    {"AbstractText": "Go is a language.", "AbstractURL": "https://go.dev"}
                ).encode()
            return json.dumps(
                {
                    "RelatedTopics": [
                        {
                            "Text": "Go (game)",
                            "FirstURL": "https://duckduckgo.com/Go_(game)",
                            "Icon": {"URL": "/i/go.png"},
                        },
                        {
                            "Name": "Software",
                            "Topics": [
                                {
                                    "Text": "Go compiler",
                                    "FirstURL": "https://duckduckgo.com/gc",
                                    "Icon": {"URL": ""},
                                }
                            ],
                        },
                    ]
                }
            ).encode()

        fetcher = FakeFetcher({ANSWERS_URL: handler})
        results = run(AsyncDDGS(fetcher=fetcher).answers("golang"))

        assert results == [
            {"icon": "", "text": "Go is a language.", "topic": "", "url": "https://go.dev"},
            {
                "icon": "https://duckduckgo.com/i/go.png",
                "text": "Go (game)",
                "topic": "",
                "url": "https://duckduckgo.com/Go_(game)",
            },
            {
                "icon": "",
                "text": "Go compiler",
                "topic": "Software",
                "url": "https://duckduckgo.com/gc",
            },
        ]
        assert [c["q"] for c in fetcher.calls_to(ANSWERS_URL)] == [
            "what is golang",
            "golang",
        ]

    def test_invalid_json(self):
        fetcher = FakeFetcher({ANSWERS_URL: b"<html>"})
        with pytest.raises(ExtractionFailed):
            run(AsyncDDGS(fetcher=fetcher).answers("golang"))


class TestSuggestions:
    """Tests for AsyncDDGS.suggestions."""

    def test_returns_objects(self):
        body = json.dumps([{"phrase": "golang"}, "junk", {"phrase": "go tutorial"}])
        fetcher = FakeFetcher({SUGGESTIONS_URL: body.encode()})
        results = run(AsyncDDGS(fetcher=fetcher).suggestions("go", region="us-en"))

        assert results == [{"phrase": "golang"}, {"phrase": "go tutorial"}]
        assert fetcher.calls_to(SUGGESTIONS_URL)[0] == {"q": "go", "kl": "us-en"}

    def test_not_an_array(self):
        fetcher = FakeFetcher({SUGGESTIONS_URL: b'{"phrase": "go"}'})
        with pytest.raises(ExtractionFailed):
            run(AsyncDDGS(fetcher=fetcher).suggestions("go"))


class TestTranslate:
    """Tests for AsyncDDGS.translate."""

    @staticmethod
    def handler(params, data):
        text = data.decode("utf-8")
        if text == "fail":
            return TransportError("HTTP 500")
        delay = 0.03 if text == "hello" else 0.0
        return delay, json.dumps({"translated": text.upper()}).encode()

    def test_keeps_input_order_and_drops_failures(self, seed_html):
        fetcher = FakeFetcher({BASE_URL: seed_html, TRANSLATE_URL: self.handler})
        results = run(
            AsyncDDGS(fetcher=fetcher).translate(
                ["hello", "fail", "world"], from_="en", to="de"
            )
        )

        assert results == [{"hello": "HELLO"}, {"world": "WORLD"}]
        params = fetcher.calls_to(TRANSLATE_URL)[0]
        assert params["to"] == "de"
        assert params["from"] == "en"
        assert params["vqd"] == "4-123456789012345678901234567890"

    def test_sends_text_as_post_body(self, seed_html):
        fetcher = FakeFetcher({BASE_URL: seed_html, TRANSLATE_URL: self.handler})
        run(AsyncDDGS(fetcher=fetcher).translate("bonjour"))

        method, _, params, data = fetcher.calls[-1]
        assert method == "POST"
        assert data == "bonjour".encode("utf-8")
        assert "from" not in params
        assert fetcher.calls_to(BASE_URL) == [{"q": "translate"}]

    def test_missing_keywords(self):
        with pytest.raises(MissingKeywords):
            run(AsyncDDGS(fetcher=FakeFetcher({})).translate([]))


class TestLifecycle:
    """Tests for start/close and the async context manager."""

    def test_context_manager(self):
        fetcher = FakeFetcher({})

        async def use():
            async with AsyncDDGS(fetcher=fetcher) as ddgs:
                assert fetcher.started
                return ddgs

        run(use())
        assert not fetcher.started
