"""
Integration tests for user tokens and record entities on a migrated store.
"""

import logging

import pytest

from bridgestore import BridgeStore
from bridgestore.connectors import IntegrityError, QueryError, StorageConnectionError
from bridgestore.records import DbEmoji, DbEvent

pytestmark = pytest.mark.integration


def make_emoji(emoji_id='1234', mxc_url='mxc://example.org/blobcat'):
    emoji = DbEmoji()
    emoji.emoji_id = emoji_id
    emoji.name = 'blobcat'
    emoji.animated = True
    emoji.mxc_url = mxc_url
    return emoji


def make_event(matrix_id, remote_id, guild_id='1111', channel_id='5555'):
    event = DbEvent()
    event.matrix_id = matrix_id
    event.remote_id = remote_id
    event.guild_id = guild_id
    event.channel_id = channel_id
    return event


class TestUserTokens:
    """Test account link and token storage."""

    @pytest.mark.asyncio
    async def test_add_and_read_token(self, store):
        await store.add_user_token('@alice:example.org', '4321', 'secret')

        assert await store.get_user_remote_ids('@alice:example.org') == ['4321']
        assert await store.get_token('4321') == 'secret'

    @pytest.mark.asyncio
    async def test_unknown_remote_id_has_no_token(self, store):
        assert await store.get_token('nope') is None
        assert await store.get_user_remote_ids('@nobody:example.org') == []

    @pytest.mark.asyncio
    async def test_multiple_remote_ids_ordered(self, store):
        await store.add_user_token('@alice:example.org', '9999', 'b')
        await store.add_user_token('@alice:example.org', '1000', 'a')

        assert await store.get_user_remote_ids('@alice:example.org') == ['1000', '9999']

    @pytest.mark.asyncio
    async def test_delete_token(self, store):
        await store.add_user_token('@alice:example.org', '4321', 'secret')

        await store.delete_user_token('4321')

        assert await store.get_token('4321') is None
        assert await store.get_user_remote_ids('@alice:example.org') == []

    @pytest.mark.asyncio
    async def test_second_user_same_remote_id(self, store, caplog):
        await store.add_user_token('@alice:example.org', '4321', 'first')

        with caplog.at_level(logging.ERROR):
            with pytest.raises(IntegrityError):
                await store.add_user_token('@bob:example.org', '4321', 'second')

        assert 'Error storing user token' in caplog.text
        # The link row is written independently of the failed token insert
        assert await store.get_user_remote_ids('@bob:example.org') == ['4321']
        assert await store.get_token('4321') == 'first'


class TestEmojiRecords:
    """Test DbEmoji through the store."""

    @pytest.mark.asyncio
    async def test_insert_and_get_by_id(self, store):
        await store.insert(make_emoji())

        emoji = await store.get(DbEmoji, {'emoji_id': '1234'})

        assert emoji.result
        assert emoji.name == 'blobcat'
        assert emoji.animated is True
        assert emoji.mxc_url == 'mxc://example.org/blobcat'
        assert emoji.created_at == emoji.updated_at

    @pytest.mark.asyncio
    async def test_get_by_mxc_url(self, store):
        await store.insert(make_emoji())

        emoji = await store.get(DbEmoji, {'mxc_url': 'mxc://example.org/blobcat'})

        assert emoji.emoji_id == '1234'

    @pytest.mark.asyncio
    async def test_get_missing_emoji(self, store):
        emoji = await store.get(DbEmoji, {'emoji_id': 'missing'})

        assert emoji is not None
        assert emoji.queried
        assert not emoji.result

    @pytest.mark.asyncio
    async def test_update(self, store):
        emoji = make_emoji()
        await store.insert(emoji)

        emoji.name = 'blobcat_happy'
        emoji.animated = False
        await store.update(emoji)

        loaded = await store.get(DbEmoji, {'emoji_id': '1234'})
        assert loaded.name == 'blobcat_happy'
        assert loaded.animated is False
        assert loaded.updated_at >= loaded.created_at

    @pytest.mark.asyncio
    async def test_delete(self, store):
        emoji = make_emoji()
        await store.insert(emoji)

        await store.delete(emoji)

        assert not (await store.get(DbEmoji, {'emoji_id': '1234'})).result

    @pytest.mark.asyncio
    async def test_duplicate_mxc_url_rejected(self, store):
        await store.insert(make_emoji())

        with pytest.raises(IntegrityError):
            await store.insert(make_emoji(emoji_id='5678'))

    @pytest.mark.asyncio
    async def test_lookup_without_key_returns_none(self, store):
        assert await store.get(DbEmoji, {}) is None

    @pytest.mark.asyncio
    async def test_failed_query_returns_none(self, store, caplog):
        await store.db.exec('DROP TABLE remote_emoji')

        with caplog.at_level(logging.WARNING):
            assert await store.get(DbEmoji, {'emoji_id': '1234'}) is None
        assert 'FAILED' in caplog.text

        with pytest.raises(QueryError):
            await store.get(DbEmoji, {'emoji_id': '1234'}, raise_errors=True)

    @pytest.mark.asyncio
    async def test_get_before_init_raises(self, db_path):
        with pytest.raises(StorageConnectionError):
            await BridgeStore(db_path).get(DbEmoji, {'emoji_id': '1234'})


class TestEventRecords:
    """Test DbEvent through the store."""

    @pytest.mark.asyncio
    async def test_insert_and_get_by_matrix_id(self, store):
        await store.insert(make_event('$a:example.org', '7001'))

        event = await store.get(DbEvent, {'matrix_id': '$a:example.org'})

        assert event.result
        assert event.remote_id == '7001'
        assert event.guild_id == '1111'
        assert event.channel_id == '5555'
        assert event.next() is False

    @pytest.mark.asyncio
    async def test_remote_message_with_several_events(self, store):
        await store.insert(make_event('$a:example.org', '7001'))
        await store.insert(make_event('$b:example.org', '7001'))

        event = await store.get(DbEvent, {'remote_id': '7001'})

        assert event.matrix_id == '$a:example.org'
        assert event.next() is True
        assert event.matrix_id == '$b:example.org'
        assert event.next() is False
        rows = await store.db.all('SELECT * FROM remote_msg_store')
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_delete_keeps_message_until_last_event(self, store):
        first = make_event('$a:example.org', '7001')
        second = make_event('$b:example.org', '7001')
        await store.insert(first)
        await store.insert(second)

        await store.delete(first)
        assert len(await store.db.all('SELECT * FROM remote_msg_store')) == 1

        await store.delete(second)
        assert await store.db.all('SELECT * FROM remote_msg_store') == []
        assert not (await store.get(DbEvent, {'remote_id': '7001'})).result

    @pytest.mark.asyncio
    async def test_update_not_supported(self, store):
        with pytest.raises(QueryError, match="immutable"):
            await store.update(make_event('$a:example.org', '7001'))

    @pytest.mark.asyncio
    async def test_duplicate_mapping_rejected(self, store):
        await store.insert(make_event('$a:example.org', '7001'))

        with pytest.raises(IntegrityError):
            await store.insert(make_event('$a:example.org', '7001'))
