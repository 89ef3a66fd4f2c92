"""Tests for aggregate_feeds.aggregate_feeds module."""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from aggregate_feeds.aggregate_feeds import (
    aggregate_feeds,
    load_feed_items,
    parse_feeds,
    run_per_source,
    write_combined_feed,
)
from aggregate_feeds.config import AggregateConfig
from aggregate_feeds.errors import AggregationError, FetchError, StorageError
from aggregate_feeds.models import FeedItem, FeedSource
from common.hashing import hash_text

ALPHA = FeedSource("https://alpha.example/feed", "alpha.xml")
BETA = FeedSource("https://beta.example/feed", "beta.xml")
GAMMA = FeedSource("https://gamma.example/feed", "gamma.xml")


def feed_document(*titles: str) -> str:
    items = "".join(f"<item><title>{t}</title><guid>{t}</guid></item>" for t in titles)
    return f'<?xml version="1.0"?><rss><channel><title>Channel</title>{items}</channel></rss>'


DOCUMENTS = {
    ALPHA.url: feed_document("a1", "a2"),
    BETA.url: feed_document("b1"),
    GAMMA.url: feed_document("g1", "g2", "g3"),
}


def fake_get(documents):
    def get(url, **kwargs):
        body = documents[url]
        if isinstance(body, Exception):
            raise body
        response = Mock()
        response.text = body
        response.status_code = 200
        response.ok = True
        response.headers = {"Content-Type": "application/rss+xml; charset=UTF-8"}
        return response

    return get


@pytest.fixture
def config(tmp_path):
    return AggregateConfig(
        raw_dir=str(tmp_path / "feeds"),
        output_path=str(tmp_path / "combined_feeds.json"),
    )


@patch("aggregate_feeds.fetch_feeds.fetch_feed.requests.get")
class TestAggregateFeeds:
    def test_combines_sources_in_source_order(self, mock_get, config) -> None:
        mock_get.side_effect = fake_get(DOCUMENTS)

        result = aggregate_feeds([ALPHA, BETA, GAMMA], config)

        assert [item.title for item in result.items] == ["a1", "a2", "b1", "g1", "g2", "g3"]
        assert result.ok

    def test_writes_raw_documents(self, mock_get, config, tmp_path) -> None:
        mock_get.side_effect = fake_get(DOCUMENTS)

        aggregate_feeds([ALPHA, BETA], config)

        assert (tmp_path / "feeds" / "alpha.xml").read_text(encoding="utf-8") == DOCUMENTS[ALPHA.url]
        assert (tmp_path / "feeds" / "beta.xml").exists()

    def test_writes_pretty_json_output(self, mock_get, config) -> None:
        mock_get.side_effect = fake_get(DOCUMENTS)

        result = aggregate_feeds([BETA], config)

        content = result.output_path.read_text(encoding="utf-8")
        assert json.loads(content) == [
            {
                "title": "b1",
                "link": "",
                "pub_date": "",
                "encoded_content": "",
                "guid": hash_text("b1"),
            }
        ]
        assert content.startswith('[\n  {\n    "title": "b1"')

    def test_rerun_is_byte_identical(self, mock_get, config) -> None:
        mock_get.side_effect = fake_get(DOCUMENTS)

        first = aggregate_feeds([ALPHA, BETA, GAMMA], config).output_path.read_bytes()
        second = aggregate_feeds([ALPHA, BETA, GAMMA], config).output_path.read_bytes()

        assert first == second

    def test_concurrent_fetch_and_parse_keep_order(self, mock_get, tmp_path) -> None:
        mock_get.side_effect = fake_get(DOCUMENTS)
        config = AggregateConfig(
            raw_dir=str(tmp_path / "feeds"),
            output_path=str(tmp_path / "out.json"),
            fetch_workers=3,
            parse_workers=3,
        )

        result = aggregate_feeds([GAMMA, ALPHA, BETA], config)

        assert [item.title for item in result.items] == ["g1", "g2", "g3", "a1", "a2", "b1"]

    def test_isolate_mode_skips_unreachable_source(self, mock_get, config) -> None:
        mock_get.side_effect = fake_get({**DOCUMENTS, BETA.url: requests.ConnectionError("down")})

        result = aggregate_feeds([ALPHA, BETA, GAMMA], config)

        assert [item.title for item in result.items] == ["a1", "a2", "g1", "g2", "g3"]
        assert len(result.failures) == 1
        assert result.failures[0].source == "beta"
        assert result.failures[0].stage == "fetch"
        assert result.output_path.exists()

    def test_isolate_mode_does_not_parse_stale_document_of_failed_fetch(self, mock_get, config, tmp_path) -> None:
        (tmp_path / "feeds").mkdir()
        (tmp_path / "feeds" / "beta.xml").write_text(feed_document("stale"), encoding="utf-8")
        mock_get.side_effect = fake_get({**DOCUMENTS, BETA.url: requests.ConnectionError("down")})

        result = aggregate_feeds([ALPHA, BETA], config)

        assert "stale" not in [item.title for item in result.items]

    def test_isolate_mode_skips_malformed_source(self, mock_get, config) -> None:
        mock_get.side_effect = fake_get({**DOCUMENTS, ALPHA.url: "<rss><item></rss>"})

        result = aggregate_feeds([ALPHA, BETA], config)

        assert [item.title for item in result.items] == ["b1"]
        assert result.failures[0].source == "alpha"
        assert result.failures[0].stage == "parse"

    def test_strict_mode_aborts_on_malformed_source(self, mock_get, tmp_path) -> None:
        mock_get.side_effect = fake_get({**DOCUMENTS, BETA.url: "<rss><item></rss>"})
        config = AggregateConfig(
            raw_dir=str(tmp_path / "feeds"),
            output_path=str(tmp_path / "out.json"),
            mode="strict",
        )

        with pytest.raises(AggregationError) as exc_info:
            aggregate_feeds([ALPHA, BETA, GAMMA], config)

        assert exc_info.value.stage == "parse"
        assert exc_info.value.source == "beta"
        assert "beta" in str(exc_info.value)
        assert not (tmp_path / "out.json").exists()

    def test_strict_mode_stops_fetching_after_first_failure(self, mock_get, tmp_path) -> None:
        mock_get.side_effect = fake_get({**DOCUMENTS, ALPHA.url: requests.ConnectionError("down")})
        config = AggregateConfig(
            raw_dir=str(tmp_path / "feeds"),
            output_path=str(tmp_path / "out.json"),
            mode="strict",
        )

        with pytest.raises(AggregationError) as exc_info:
            aggregate_feeds([ALPHA, BETA], config)

        assert exc_info.value.stage == "fetch"
        assert isinstance(exc_info.value.cause, FetchError)
        assert mock_get.call_count == 1

    def test_skip_fetch_parses_saved_documents(self, mock_get, config, tmp_path) -> None:
        (tmp_path / "feeds").mkdir()
        (tmp_path / "feeds" / "alpha.xml").write_text(feed_document("saved"), encoding="utf-8")

        result = aggregate_feeds([ALPHA], config, fetch=False)

        mock_get.assert_not_called()
        assert [item.title for item in result.items] == ["saved"]


class TestLoadFeedItems:
    def test_missing_document_raises_storage_error(self, tmp_path) -> None:
        with pytest.raises(StorageError):
            load_feed_items(ALPHA, tmp_path)

    def test_parses_saved_document(self, tmp_path) -> None:
        (tmp_path / "alpha.xml").write_text(feed_document("x"), encoding="utf-8")

        assert [item.title for item in load_feed_items(ALPHA, tmp_path)] == ["x"]


class TestParseFeeds:
    def test_missing_document_is_storage_failure(self, config) -> None:
        items, failures = parse_feeds([ALPHA], config)

        assert items == []
        assert failures[0].stage == "storage"


class TestRunPerSource:
    def test_results_follow_source_order(self) -> None:
        results, failures = run_per_source(lambda s: s.name, [GAMMA, ALPHA, BETA], workers=3, strict=False)

        assert [r for _, r in results] == ["gamma", "alpha", "beta"]
        assert failures == []

    def test_unexpected_exceptions_propagate(self) -> None:
        def boom(source):
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            run_per_source(boom, [ALPHA], workers=1, strict=False)


class TestWriteCombinedFeed:
    def test_overwrites_previous_output(self, tmp_path) -> None:
        path = tmp_path / "out.json"
        path.write_text("previous run output that is longer")

        write_combined_feed([FeedItem(title="t")], path)

        assert json.loads(path.read_text(encoding="utf-8"))[0]["title"] == "t"

    def test_serialization_failure_aborts(self, tmp_path) -> None:
        with pytest.raises(AggregationError) as exc_info:
            write_combined_feed([FeedItem(title=object())], tmp_path / "out.json")

        assert exc_info.value.stage == "serialize"
