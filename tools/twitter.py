"""
Twitter Username History
------------------------
Looks up screen-name changes for a Twitter account on memory.lol.

Response shape from GET /v1/tw/<name>:
    {"accounts": [{"id_str": "44196397",
                   "screen_names": {"elonmusk": ["2009-06-02", "2023-07-24"]}}]}
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging
import re

from api.client import APIClient, APIStatus, create_memory_lol_client
from .registry import ExecutorFailure, ExecutorOutput

_HANDLE = re.compile(r"^[A-Za-z0-9_]{1,15}$")


class TwitterHistoryChecker:
    """
    Executor for the check-twitter intent.

    Called with {"screenName": ...}; returns the history as text and data.
    """

    def __init__(
        self,
        client: Optional[APIClient] = None,
        save_reports: bool = False,
        report_dir: str = ".",
    ):
        self._client = client or create_memory_lol_client()
        self._save_reports = save_reports
        self._report_dir = Path(report_dir)
        self._logger = logging.getLogger("monad.tools.twitter")

    def __call__(self, params: Dict[str, Any]) -> ExecutorOutput:
        return self.check(params.get("screenName") or "")

    def check(self, screen_name: str) -> ExecutorOutput:
        """Fetch and format the username change history."""
        if screen_name.startswith("@"):
            screen_name = screen_name[1:]

        if not screen_name:
            raise ExecutorFailure("No Twitter screen name provided")

        if not _HANDLE.match(screen_name):
            raise ExecutorFailure(
                f"Invalid Twitter handle: {screen_name}. Twitter handles can only contain "
                "letters, numbers and underscores, and must be 15 characters or less."
            )

        self._logger.info(f"Querying username changes for {screen_name}")
        response = self._client.get(f"v1/tw/{screen_name}")

        if not response.success:
            raise self._failure(screen_name, response.status, response.status_code)

        accounts = (response.data or {}).get("accounts") or []
        if not accounts:
            return ExecutorOutput(
                text=f"No username change history found for {screen_name}",
                data={"screenName": screen_name, "accounts": []},
            )

        history = {
            "screenName": screen_name,
            "accounts": [self._parse_account(account) for account in accounts],
        }

        if self._save_reports:
            self._write_report(screen_name, history)

        return ExecutorOutput(text=format_history(history), data=history)

    @staticmethod
    def _parse_account(account: Dict[str, Any]) -> Dict[str, Any]:
        screen_names = []
        for name, dates in (account.get("screen_names") or {}).items():
            if isinstance(dates, list):
                dates = " to ".join(str(date) for date in dates)
            screen_names.append({"name": name, "dates": dates})

        return {"userId": account.get("id_str"), "screenNames": screen_names}

    def _failure(self, screen_name: str, status: APIStatus, status_code: int) -> ExecutorFailure:
        if status == APIStatus.NOT_FOUND:
            return ExecutorFailure(
                f"Twitter user {screen_name} not found in memory.lol database",
                code=404,
            )
        if status == APIStatus.NETWORK_ERROR:
            return ExecutorFailure(
                "Network error: No response received from server",
                code="NETWORK_ERROR",
            )
        if status == APIStatus.TIMEOUT:
            return ExecutorFailure("Request to memory.lol timed out", code="TIMEOUT")
        return ExecutorFailure(f"API error: {status_code}", code=status_code)

    def _write_report(self, screen_name: str, history: Dict[str, Any]) -> Path:
        self._report_dir.mkdir(parents=True, exist_ok=True)
        report_path = self._report_dir / f"twitter_history_{screen_name}.json"
        report_path.write_text(json.dumps(history, indent=2), encoding="utf-8")
        self._logger.info(f"Twitter history for {screen_name} saved to {report_path}")
        return report_path


def format_history(history: Dict[str, Any]) -> str:
    lines: List[str] = [f"Username change history for {history['screenName']}:", ""]

    for account in history["accounts"]:
        lines.append(f"User ID {account['userId']}:")
        for item in account["screenNames"]:
            lines.append(f"- {item['name']} ({item['dates']})")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
