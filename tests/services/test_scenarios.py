"""Tests for the four scenario services driven through in-memory I/O."""

from __future__ import annotations

from pathlib import Path

from dispatchkit.config.settings import DispatchSettings
from dispatchkit.services.approval import ApprovalService
from dispatchkit.services.broadcast import BroadcastService
from dispatchkit.services.chat import ChatService
from dispatchkit.services.io import ListSink, TextLineSource
from dispatchkit.services.pricing import PricingService


def _src(text: str) -> TextLineSource:
    return TextLineSource.from_text(text)


class TestBroadcastService:
    def test_reference_scenario(self, settings: DispatchSettings) -> None:
        result = BroadcastService(settings).run(_src("2\nAmy\nBob\n3\n"))
        assert result.ok
        assert result.lines == ["Amy 1", "Bob 1", "Amy 2", "Bob 2", "Amy 3", "Bob 3"]
        assert result.data["hour"] == 3
        assert result.data["participants"] == ["Amy", "Bob"]

    def test_streams_to_sink(self, settings: DispatchSettings) -> None:
        sink = ListSink()
        result = BroadcastService(settings).run(_src("1 Amy 2"), sink)
        assert sink.lines == ["Amy 1", "Amy 2"]
        assert result.lines == sink.lines

    def test_zero_updates(self, settings: DispatchSettings) -> None:
        result = BroadcastService(settings).run(_src("1\nAmy\n0\n"))
        assert result.ok
        assert result.lines == []

    def test_wraps_past_midnight(self, settings: DispatchSettings) -> None:
        result = BroadcastService(settings).run(_src("1\nAmy\n25\n"))
        assert result.lines[-2:] == ["Amy 0", "Amy 1"]
        assert result.data["hour"] == 1

    def test_start_hour_from_config(self, workdir: Path) -> None:
        settings = DispatchSettings.from_cli(root=workdir, clock={"start_hour": 22})
        result = BroadcastService(settings).run(_src("1\nAmy\n2\n"))
        assert result.lines == ["Amy 23", "Amy 0"]

    def test_missing_names_is_malformed(self, settings: DispatchSettings) -> None:
        result = BroadcastService(settings).run(_src("3\nAmy\n"))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "MALFORMED_INPUT"
        assert result.lines == ["Invalid input"]

    def test_duplicate_watcher_fails(self, settings: DispatchSettings) -> None:
        result = BroadcastService(settings).run(_src("2\nAmy\nAmy\n1\n"))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "DUPLICATE_PARTICIPANT"

    def test_duplicate_watcher_replaced(self, workdir: Path) -> None:
        settings = DispatchSettings.from_cli(root=workdir, registry={"duplicates": "replace"})
        result = BroadcastService(settings).run(_src("3\nAmy\nBob\nAmy\n1\n"))
        assert result.ok
        assert result.lines == ["Amy 1", "Bob 1"]


class TestPricingService:
    def test_reference_scenario_halts_on_unknown(self, settings: DispatchSettings) -> None:
        result = PricingService(settings).run(_src("4\n120 1\n120 2\n50 3\n10 1\n"))
        assert result.ok
        assert result.lines == ["108", "115", "Unknown strategy type"]
        assert result.data["halted"] is True
        assert result.data["results"] == [108, 115]

    def test_keep_going_skips_unknown(self, workdir: Path) -> None:
        settings = DispatchSettings.from_cli(root=workdir, keep_going=True)
        result = PricingService(settings).run(_src("3\n120 1\n50 3\n10 1\n"))
        assert result.ok
        assert result.lines == ["108", "Unknown strategy type", "9"]
        assert result.data["skipped"] == [1]
        assert result.data["halted"] is False
        assert len(result.warnings) == 1

    def test_halt_setting_from_config(self, workdir: Path) -> None:
        settings = DispatchSettings.from_cli(root=workdir, scenario={"halt_on_error": False})
        result = PricingService(settings).run(_src("2\n1 9\n100 2\n"))
        assert result.lines == ["Unknown strategy type", "95"]

    def test_strategy_names_accepted(self, settings: DispatchSettings) -> None:
        result = PricingService(settings).run(
            _src("2\n300 tiered-threshold\n300 flat-percentage\n")
        )
        assert result.lines == ["260", "270"]

    def test_malformed_case_fails(self, settings: DispatchSettings) -> None:
        result = PricingService(settings).run(_src("2\n120\n120 1\n"))
        assert not result.ok
        assert result.lines == ["Invalid input"]
        assert result.error is not None
        assert result.error.code == "MALFORMED_INPUT"

    def test_non_integer_price_fails(self, settings: DispatchSettings) -> None:
        result = PricingService(settings).run(_src("1\nabc 1\n"))
        assert not result.ok
        assert result.lines == ["Invalid input"]

    def test_short_input_fails(self, settings: DispatchSettings) -> None:
        result = PricingService(settings).run(_src("2\n120 1\n"))
        assert not result.ok
        assert result.lines == ["108", "Invalid input"]

    def test_custom_pricing_config(self, workdir: Path) -> None:
        settings = DispatchSettings.from_cli(
            root=workdir,
            pricing={"flat_rate": "0.5", "tiers": {"10": 1}},
        )
        result = PricingService(settings).run(_src("2\n9 1\n12 2\n"))
        assert result.lines == ["5", "11"]

    def test_catalog(self, settings: DispatchSettings) -> None:
        result = PricingService(settings).catalog()
        assert result.ok
        assert result.op == "strategies"
        names = [entry["name"] for entry in result.data["strategies"]]
        assert names == ["flat-percentage", "tiered-threshold"]
        assert result.data["strategies"][0]["aliases"] == ["1"]


class TestChatService:
    def test_reference_scenario(self, settings: DispatchSettings) -> None:
        result = ChatService(settings).run(_src("3\nA\nB\nC\nA hi\n"))
        assert result.ok
        assert result.lines == ["B received: hi", "C received: hi"]
        assert result.data["delivered"] == 1

    def test_multiple_messages_and_unknown_sender(self, settings: DispatchSettings) -> None:
        result = ChatService(settings).run(_src("2\nA B\nB hey\nZ lost\nA hi there\n"))
        assert result.ok
        assert result.lines == ["A received: hey", "B received: hi there"]
        assert result.data["dropped"] == 1
        assert result.data["delivered"] == 2

    def test_no_messages(self, settings: DispatchSettings) -> None:
        result = ChatService(settings).run(_src("2\nA\nB\n"))
        assert result.ok
        assert result.lines == []

    def test_message_on_following_line(self, settings: DispatchSettings) -> None:
        result = ChatService(settings).run(_src("2\nA B\nA\nhi\n"))
        assert result.ok
        assert result.lines == ["B received: hi"]
        assert result.data["delivered"] == 1

    def test_trailing_sender_ends_stream(self, settings: DispatchSettings) -> None:
        result = ChatService(settings).run(_src("2\nA B\nA hi\nB\n"))
        assert result.ok
        assert result.lines == ["B received: hi"]
        assert result.error is None

    def test_next_line_taken_whole_as_message(self, settings: DispatchSettings) -> None:
        result = ChatService(settings).run(_src("2\nA\nB\nB\nA again\n"))
        assert result.ok
        assert result.lines == ["A received: A again"]
        assert result.warnings == []

    def test_duplicate_user_fails(self, settings: DispatchSettings) -> None:
        result = ChatService(settings).run(_src("2\nA\nA\nA hi\n"))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "DUPLICATE_PARTICIPANT"
        assert result.lines == []


class TestApprovalService:
    def test_reference_scenario(self, settings: DispatchSettings) -> None:
        result = ApprovalService(settings).run(_src("4\nann 2\nbo 5\ncy 9\ndee 15\n"))
        assert result.ok
        assert result.lines == [
            "ann Approved by Supervisor.",
            "bo Approved by Manager.",
            "cy Approved by Director.",
            "dee Denied by Director.",
        ]
        assert [d["outcome"] for d in result.data["decisions"]] == [
            "approved",
            "approved",
            "approved",
            "denied",
        ]

    def test_wrong_token_count_halts(self, settings: DispatchSettings) -> None:
        result = ApprovalService(settings).run(_src("3\nann 2\nbo 5 extra\ncy 1\n"))
        assert not result.ok
        assert result.lines == ["ann Approved by Supervisor.", "Invalid input"]

    def test_negative_days_halts(self, settings: DispatchSettings) -> None:
        result = ApprovalService(settings).run(_src("1\nann -2\n"))
        assert not result.ok
        assert result.lines == ["Invalid input"]

    def test_keep_going(self, workdir: Path) -> None:
        settings = DispatchSettings.from_cli(root=workdir, keep_going=True)
        result = ApprovalService(settings).run(_src("2\nann\nbo 8\n"))
        assert result.ok
        assert result.lines == ["Invalid input", "bo Approved by Director."]
        assert result.data["skipped"] == 1

    def test_explicit_links(self, settings: DispatchSettings) -> None:
        service = ApprovalService(settings, links=[(1, "Lead"), (2, "VP")])
        result = service.run(_src("2\nann 2\nbo 3\n"))
        assert result.lines == ["ann Approved by VP.", "bo Denied by VP."]

    def test_links_from_config(self, workdir: Path) -> None:
        settings = DispatchSettings.from_cli(
            root=workdir,
            chain={"links": [{"capacity": 30, "label": "HR"}]},
        )
        result = ApprovalService(settings).run(_src("1\nann 20\n"))
        assert result.lines == ["ann Approved by HR."]

    def test_empty_chain_is_configuration_error(self, settings: DispatchSettings) -> None:
        result = ApprovalService(settings, links=[]).run(_src("1\nann 1\n"))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "CHAIN_CONFIGURATION"
        assert result.lines == []
