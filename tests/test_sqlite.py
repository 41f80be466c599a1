from tvdispatch.domain.models import MessageStatus, SettingType
from tvdispatch.infrastructure.persistence.sqlite import SQLitePersistence


def test_default_rows_are_seeded(persistence):
    entries = {entry.type: entry for entry in persistence.list_settings()}

    assert entries[SettingType.TELEGRAM_BOT].enabled is True
    assert entries[SettingType.TRADINGVIEW_SCREENSHOT].data == "1D"
    assert entries[SettingType.TRADINGVIEW_CREDENTIALS].enabled is False
    assert SettingType.WORKER not in entries


def test_seeding_is_idempotent(tmp_path):
    path = tmp_path / "app.db"
    SQLitePersistence(path).close()
    store = SQLitePersistence(path)
    try:
        assert len(store.list_settings()) == 3
    finally:
        store.close()


def test_find_setting_returns_first_of_duplicates(persistence):
    persistence.create_setting(SettingType.TRADINGVIEW_SCREENSHOT, "1W")

    assert persistence.find_setting(SettingType.TRADINGVIEW_SCREENSHOT).data == "1D"


def test_update_setting_data_reports_rowcount(persistence):
    assert persistence.update_setting_data(SettingType.WORKER, "now") == 0
    assert persistence.update_setting_data(SettingType.TELEGRAM_BOT, "abc") == 1
    assert persistence.find_setting(SettingType.TELEGRAM_BOT).data == "abc"


def test_pending_messages_in_insertion_order(persistence):
    first = persistence.create_message("AAPL", "a", None)
    second = persistence.create_message("TSLA", "b", "1h")
    persistence.update_message(first.id, status=MessageStatus.SUCCESS)
    third = persistence.create_message("MSFT", "c", None)

    pending = persistence.get_messages_by_status(MessageStatus.PENDING)

    assert [item.id for item in pending] == [second.id, third.id]
    assert pending[0].timeframe == "1h"


def test_update_message_only_touches_given_fields(persistence):
    message = persistence.create_message("AAPL", "a", None)

    persistence.update_message(message.id, log='{"error": "x"}')
    stored = persistence.get_message(message.id)

    assert stored.status == MessageStatus.PENDING
    assert stored.log == '{"error": "x"}'


def test_recent_messages_newest_first_with_filter(persistence):
    older = persistence.create_message("AAPL", "a", None)
    newer = persistence.create_message("TSLA", "b", None)
    persistence.update_message(newer.id, status=MessageStatus.FAILED)

    assert [m.id for m in persistence.get_recent_messages(None, 10)] == [newer.id, older.id]
    assert [m.id for m in persistence.get_recent_messages(MessageStatus.FAILED, 10)] == [newer.id]


def test_message_symbol_and_caption(persistence):
    message = persistence.create_message("NASDAQ:AAPL  Buy now ", "a,b", None)

    assert message.symbol == "NASDAQ:AAPL"
    assert message.caption == "Buy now"
    assert message.channel_list() == ["a", "b"]
