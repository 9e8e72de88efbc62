"""
Tests for /record: local validation happens before any network call.
"""

import datetime as dt

import pytest

from conftest import RecordingTransport, field_map, json_handler, make_api, run
from yume_bot.config.settings import Settings
from yume_bot.discord.commands.record import (
    RECORD_EVENTS,
    resolve_event_name,
    run_record,
    validate_record_date,
)

TODAY = dt.date(2025, 10, 16)


def _created(**overrides):
    body = {"id": 321, "name": "Zezima", "event": "ToA Mass", "date": "2025-12-25"}
    body.update(overrides)
    return json_handler(body, status=201)


# ============================================================
# Date validation
# ============================================================

class TestValidateRecordDate:

    def test_valid_date_accepted(self):
        assert validate_record_date("2025-12-25", TODAY) == ("2025-12-25", None)

    def test_omitted_defaults_to_today(self):
        assert validate_record_date(None, TODAY) == ("2025-10-16", None)

    @pytest.mark.parametrize(
        "raw",
        ["2025-13-01", "12-25-2025", "2025-1-1", "", "2025-02-30", "２０２５-12-25", " 2025-12-25 ", "2025-12-25\n"],
    )
    def test_invalid_dates_rejected(self, raw):
        value, err = validate_record_date(raw, TODAY)
        assert value is None
        assert "YYYY-MM-DD" in err


class TestResolveEventName:

    def test_regular_choice_passes_through(self):
        assert resolve_event_name("Wildy Wednesday", None) == ("Wildy Wednesday", None)

    def test_other_requires_custom_name(self):
        name, err = resolve_event_name("Other", None)
        assert name is None
        assert '"Other"' in err

    def test_other_blank_custom_name_rejected(self):
        name, err = resolve_event_name("Other", "   ")
        assert name is None
        assert err

    def test_other_uses_custom_name(self):
        assert resolve_event_name("Other", " Barbarian Assault ") == ("Barbarian Assault", None)

    def test_other_is_a_choice(self):
        assert "Other" in RECORD_EVENTS


# ============================================================
# Handler
# ============================================================

class TestRunRecord:

    @pytest.mark.parametrize("bad", ["2025-13-01", "12-25-2025", "2025-1-1", ""])
    def test_bad_date_makes_no_network_call(self, settings, interaction, bad):
        transport = RecordingTransport(_created())
        run(
            run_record(
                interaction, settings, player="Zezima", event="ToA Mass", date=bad, api=make_api(transport), today=TODAY
            )
        )

        assert transport.requests == []
        assert not interaction.response.deferred
        sent = interaction.response.sent[-1]
        assert sent["ephemeral"] is True
        assert sent["embed"].title == "❌ Invalid Date Format"

    def test_other_without_custom_name_makes_no_network_call(self, settings, interaction):
        transport = RecordingTransport(_created())
        run(run_record(interaction, settings, player="Zezima", event="Other", api=make_api(transport), today=TODAY))

        assert transport.requests == []
        assert interaction.final_embed.title == "❌ Missing Custom Event Name"

    def test_other_with_custom_name_sends_custom_name(self, settings, interaction):
        transport = RecordingTransport(_created(event="Barbarian Assault"))
        run(
            run_record(
                interaction,
                settings,
                player="Zezima",
                event="Other",
                custom_event="Barbarian Assault",
                date="2025-12-25",
                api=make_api(transport),
                today=TODAY,
            )
        )

        assert transport.last_json() == {"name": "Zezima", "event": "Barbarian Assault", "date": "2025-12-25"}
        fields = field_map(interaction.final_embed)
        assert fields["🎯 Event"] == "Barbarian Assault"

    def test_success_echoes_record(self, settings, interaction):
        transport = RecordingTransport(_created())
        run(
            run_record(
                interaction, settings, player="Zezima", event="ToA Mass", date="2025-12-25", api=make_api(transport), today=TODAY
            )
        )

        assert interaction.response.deferred
        embed = interaction.final_embed
        assert embed.title == "✅ Attendance Recorded"
        assert embed.footer.text == "Recorded by Tester"
        fields = field_map(embed)
        assert fields["🎯 Event"] == "ToA Mass"
        assert fields["📅 Date"] == "2025-12-25"
        assert fields["🆔 Record ID"] == "321"

    def test_date_defaults_to_today(self, settings, interaction):
        transport = RecordingTransport(_created(date="2025-10-16"))
        run(run_record(interaction, settings, player="Zezima", event="ToA Mass", api=make_api(transport), today=TODAY))
        assert transport.last_json()["date"] == "2025-10-16"

    def test_missing_id_shows_created(self, settings, interaction):
        transport = RecordingTransport(_created(id=None))
        run(run_record(interaction, settings, player="Zezima", event="ToA Mass", api=make_api(transport), today=TODAY))
        assert field_map(interaction.final_embed)["🆔 Record ID"] == "Created"

    def test_not_configured_without_api_key(self, interaction):
        no_key = Settings(_env_file=None, discord_token="token", api_base_url="https://api.test", api_key="")
        transport = RecordingTransport(_created())
        run(run_record(interaction, no_key, player="Zezima", event="ToA Mass", api=make_api(transport), today=TODAY))

        assert transport.requests == []
        sent = interaction.response.sent[-1]
        assert sent["ephemeral"] is True
        assert sent["embed"].title == "❌ Not Configured"

    def test_api_error_message_is_shown(self, settings, interaction):
        transport = RecordingTransport(json_handler({"error": "Duplicate record"}, status=409))
        run(
            run_record(
                interaction, settings, player="Zezima", event="ToA Mass", date="2025-12-25", api=make_api(transport), today=TODAY
            )
        )

        embed = interaction.final_embed
        assert embed.title == "❌ Failed to Record"
        assert embed.description == "Duplicate record"

    def test_id_only_response_counts_as_success(self, settings, interaction):
        transport = RecordingTransport(json_handler({"id": 7, "success": True}, status=201))
        run(run_record(interaction, settings, player="Zezima", event="ToA Mass", api=make_api(transport), today=TODAY))

        assert len(transport.requests) == 1
        embed = interaction.final_embed
        assert embed.title == "✅ Attendance Recorded"
        assert field_map(embed)["🆔 Record ID"] == "7"

    def test_long_player_name_is_sent_whole(self, settings, interaction):
        long_name = "Z" * 150
        transport = RecordingTransport(_created(name=long_name))
        run(
            run_record(
                interaction, settings, player=f"  {long_name}  ", event="ToA Mass", api=make_api(transport), today=TODAY
            )
        )
        assert transport.last_json()["name"] == long_name
