"""Tests for cached MongoDB client handling."""

import unittest
from unittest.mock import patch, MagicMock

from pymongo.errors import AutoReconnect, InvalidURI, ServerSelectionTimeoutError

from adapter.mongodb import connection


class TestGetMongodbClient(unittest.TestCase):

    def setUp(self):
        connection.reset_client()

    def tearDown(self):
        connection.reset_client()

    @patch('adapter.mongodb.connection.MongoClient')
    def test_connects_and_caches(self, mock_client_cls):
        client = mock_client_cls.return_value

        self.assertIs(connection.get_mongodb_client(), client)
        self.assertIs(connection.get_mongodb_client(), client)

        mock_client_cls.assert_called_once()
        self.assertEqual(mock_client_cls.call_args[0][0], connection.MONGODB_URI)

    @patch('adapter.mongodb.connection.MongoClient')
    def test_reconnects_when_cached_client_fails_ping(self, mock_client_cls):
        stale, fresh = MagicMock(), MagicMock()
        mock_client_cls.side_effect = [stale, fresh]

        self.assertIs(connection.get_mongodb_client(), stale)
        stale.admin.command.side_effect = AutoReconnect('connection closed')

        self.assertIs(connection.get_mongodb_client(), fresh)

    @patch('adapter.mongodb.connection.MongoClient')
    def test_unreachable_server_is_retried(self, mock_client_cls):
        down, up = MagicMock(), MagicMock()
        down.admin.command.side_effect = ServerSelectionTimeoutError('no server')
        mock_client_cls.side_effect = [down, up]

        self.assertIsNone(connection.get_mongodb_client())
        self.assertIs(connection.get_mongodb_client(), up)

        down.close.assert_called_once()
        self.assertEqual(mock_client_cls.call_count, 2)
        self.assertIs(connection.get_mongodb_client(), up)

    @patch('adapter.mongodb.connection.MongoClient')
    def test_first_failure_logged_once(self, mock_client_cls):
        mock_client_cls.return_value.admin.command.side_effect = ServerSelectionTimeoutError('no server')

        with self.assertLogs('adapter.mongodb.connection', level='DEBUG') as logs:
            self.assertIsNone(connection.get_mongodb_client())
            self.assertIsNone(connection.get_mongodb_client())

        levels = [record.levelname for record in logs.records]
        self.assertEqual(levels.count('ERROR'), 1)
        self.assertEqual(mock_client_cls.call_count, 2)

    @patch('adapter.mongodb.connection.MongoClient', side_effect=InvalidURI('not a mongodb uri'))
    def test_invalid_uri_is_not_retried(self, mock_client_cls):
        self.assertIsNone(connection.get_mongodb_client())
        self.assertIsNone(connection.get_mongodb_client())
        mock_client_cls.assert_called_once()

    @patch('adapter.mongodb.connection.MongoClient')
    def test_reset_client_closes_cached_client(self, mock_client_cls):
        first, second = MagicMock(), MagicMock()
        mock_client_cls.side_effect = [first, second]
        self.assertIs(connection.get_mongodb_client(), first)

        connection.reset_client()

        first.close.assert_called_once()
        self.assertIs(connection.get_mongodb_client(), second)

    @patch('adapter.mongodb.connection.MONGODB_URI', '')
    def test_reset_client_clears_misconfiguration(self):
        self.assertIsNone(connection.get_mongodb_client())
        connection.reset_client()
        with patch('adapter.mongodb.connection.MONGODB_URI', 'mongodb://db:27017'), \
                patch('adapter.mongodb.connection.MongoClient') as mock_client_cls:
            self.assertIs(connection.get_mongodb_client(), mock_client_cls.return_value)

    @patch('adapter.mongodb.connection.MONGODB_URI', '')
    def test_missing_uri_returns_none(self):
        self.assertIsNone(connection.get_mongodb_client())


if __name__ == '__main__':
    unittest.main()
