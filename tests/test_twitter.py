"""
Twitter History Tests
---------------------
memory.lol lookups through a mocked transport.
"""

import json

import httpx
import pytest

from api.client import create_memory_lol_client
from tools import ExecutorFailure
from tools.twitter import TwitterHistoryChecker, format_history


HISTORY = {
    "accounts": [
        {
            "id_str": "44196397",
            "screen_names": {
                "elonmusk": ["2009-06-02", "2023-07-24"],
                "elon": None,
            },
        }
    ]
}


def checker_for(transport, **kwargs):
    return TwitterHistoryChecker(client=create_memory_lol_client(transport=transport), **kwargs)


class TestTwitterHistoryChecker:

    def test_history(self, make_transport):
        seen = []
        checker = checker_for(make_transport(200, HISTORY, seen))

        output = checker({"screenName": "elonmusk"})

        assert str(seen[0].url) == "https://api.memory.lol/v1/tw/elonmusk"
        assert output.data["screenName"] == "elonmusk"
        account = output.data["accounts"][0]
        assert account["userId"] == "44196397"
        assert account["screenNames"][0] == {"name": "elonmusk", "dates": "2009-06-02 to 2023-07-24"}
        assert output.text.startswith("Username change history for elonmusk:")
        assert "- elonmusk (2009-06-02 to 2023-07-24)" in output.text

    def test_strips_at(self, make_transport):
        seen = []
        checker_for(make_transport(200, HISTORY, seen)).check("@elonmusk")
        assert seen[0].url.path == "/v1/tw/elonmusk"

    def test_no_history(self, make_transport):
        output = checker_for(make_transport(200, {"accounts": []})).check("nobody")

        assert output.text == "No username change history found for nobody"
        assert output.data == {"screenName": "nobody", "accounts": []}

    def test_not_found(self, make_transport):
        with pytest.raises(ExecutorFailure) as excinfo:
            checker_for(make_transport(404, {})).check("ghost")

        assert excinfo.value.message == "Twitter user ghost not found in memory.lol database"
        assert excinfo.value.code == 404

    def test_server_error(self, make_transport):
        with pytest.raises(ExecutorFailure, match="API error: 503"):
            checker_for(make_transport(503, {})).check("jack")

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ExecutorFailure, match="No response received"):
            checker_for(httpx.MockTransport(handler)).check("jack")

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(ExecutorFailure, match="timed out"):
            checker_for(httpx.MockTransport(handler)).check("jack")

    @pytest.mark.parametrize("name", ["", "@", "bad-name", "a" * 16])
    def test_invalid_handle(self, make_transport, name):
        seen = []
        with pytest.raises(ExecutorFailure):
            checker_for(make_transport(200, HISTORY, seen)).check(name)
        assert seen == []

    def test_saves_report(self, make_transport, tmp_path):
        checker = checker_for(make_transport(200, HISTORY), save_reports=True, report_dir=str(tmp_path))
        checker.check("elonmusk")

        report = json.loads((tmp_path / "twitter_history_elonmusk.json").read_text(encoding="utf-8"))
        assert report["accounts"][0]["userId"] == "44196397"


class TestFormatHistory:

    def test_format(self):
        history = {
            "screenName": "jack",
            "accounts": [{"userId": "12", "screenNames": [{"name": "jack", "dates": "2006-03-21"}]}],
        }
        assert format_history(history) == (
            "Username change history for jack:\n\nUser ID 12:\n- jack (2006-03-21)\n"
        )
