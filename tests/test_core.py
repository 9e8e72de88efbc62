"""
Tests for /ping and /help.
"""

import httpx

from conftest import RecordingTransport, field_map, json_handler, make_api, run
from yume_bot.discord.commands.core import (
    STATUS_DEGRADED,
    STATUS_ERROR,
    STATUS_OFFLINE,
    STATUS_ONLINE,
    probe_api,
    run_ping,
)
from yume_bot.discord.commands.help import build_help_embed


def _probe(handler):
    async def go():
        async with make_api(RecordingTransport(handler)) as api:
            return await probe_api(api)

    return run(go())


class TestProbeApi:

    def test_ok_is_online(self):
        status, latency = _probe(json_handler({"status": "ok"}))
        assert status == STATUS_ONLINE
        assert latency.endswith("ms")

    def test_other_status_is_degraded(self):
        status, _ = _probe(json_handler({"status": "maintenance"}))
        assert status == STATUS_DEGRADED

    def test_non_json_success_is_degraded(self):
        status, _ = _probe(lambda req: httpx.Response(200, text="fine"))
        assert status == STATUS_DEGRADED

    def test_http_failure_is_error(self):
        status, latency = _probe(json_handler({"error": "nope"}, status=502))
        assert status == STATUS_ERROR
        assert latency.endswith("ms")

    def test_network_failure_is_offline(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        assert _probe(handler) == (STATUS_OFFLINE, "N/A")


class TestRunPing:

    def test_four_field_status(self, settings, interaction):
        transport = RecordingTransport(json_handler({"status": "ok"}))
        run(run_ping(interaction, settings, api=make_api(transport)))

        assert interaction.response.sent[0]["content"] == "🏓 Pinging..."
        assert transport.last.url.path == "/health"

        edit = interaction.edits[-1]
        assert edit["content"] is None
        fields = field_map(edit["embed"])
        assert list(fields) == ["🤖 Bot Latency", "💓 WebSocket", "🔗 API Status", "⚡ API Latency"]
        assert fields["🤖 Bot Latency"] == "42ms"
        assert fields["💓 WebSocket"] == "50ms"
        assert fields["🔗 API Status"] == STATUS_ONLINE

    def test_unknown_websocket_latency(self, settings, interaction):
        interaction.client.latency = float("inf")
        run(run_ping(interaction, settings, api=make_api(RecordingTransport(json_handler({"status": "ok"})))))
        assert field_map(interaction.final_embed)["💓 WebSocket"] == "N/A"


class TestHelp:

    def test_grouped_by_category(self):
        embed = build_help_embed()
        fields = field_map(embed)
        assert list(fields) == ["📊 Attendance", "🎮 Tile Events", "🔧 Utility"]
        assert "`/record`" in fields["📊 Attendance"]
        assert "`/tileevent leaderboard <event>`" in fields["🎮 Tile Events"]
        assert "`/ping`" in fields["🔧 Utility"]
